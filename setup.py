from setuptools import setup
from setuptools import find_packages

config = {
    'name' : 'ARBODYN',
    'version' : '0.1.0',
    'description' : 'Articulated Rigid BOdy DYNamics: spatial algebra, kinematics and recursive Newton-Euler',
    'install_requires' : [
        'numpy',
        'scipy',
        'prettytable',
    ],
    'extras_require' : {
        'test' : ['pytest'],
    },
    'python_requires' : '>=3.10',
    'package_dir' : {'' : 'src'},
    'packages' : find_packages('src'),
}

setup(**config)
