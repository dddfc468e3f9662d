# encoding: utf-8
from setuptools import setup


setup(
    name='desflow',
    version='0.1.0',
    description='Compile drawn discrete event simulation flows into models',
    long_description=open('README.rst', 'rb').read().decode('utf-8'),
    license='MIT',
    python_requires='>=3.7',
    install_requires=['PyYAML'],
    extras_require={'test': ['pytest']},
    packages=['desflow'],
    entry_points={
        'console_scripts': ['desflow = desflow.cli:main'],
    },
    include_package_data=True,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: Implementation :: CPython',
        'Topic :: Scientific/Engineering',
    ],
)
