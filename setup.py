from setuptools import setup

setup(
    name='atmfjstc-blocks-codegen',
    version='1.0.0',

    author_email='atmfjstc@protonmail.com',

    package_dir={'': 'src'},
    packages=[
        'atmfjstc.lib.blocks_codegen',
        'atmfjstc.lib.blocks_codegen.generators',
        'atmfjstc.lib.blocks_codegen.cli',
    ],

    install_requires=[
        'jsonschema>=3, <5',
        'termcolor>=1',
        'colorama>=0.4.6, <2',
    ],

    extras_require={
        'test': ['pytest>=6'],
    },

    entry_points={
        'console_scripts': [
            'blocks-codegen=atmfjstc.lib.blocks_codegen.cli:main',
        ],
    },

    zip_safe=True,

    description="Generates Rust source code from visual block programs, with precedence-aware expression emission",

    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Environment :: Console",
        "Topic :: Software Development :: Code Generators",
        "Typing :: Typed",
    ],
    python_requires='>=3.7',
)
