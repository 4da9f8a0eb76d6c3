from setuptools import setup, find_packages

setup(
    name="liar",
    version="2.0.0",
    description="Locally Interpolated Alkalinity Regression",
    author="LIAR Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"liar": ["settings/*.yaml"]},
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.24.0",    # For numerical operations
        "scipy>=1.10.0",    # For triangulation, interpolation and .mat loading
        "pandas>=2.0.0",    # For tabular inputs
        "pyyaml>=6.0.0",    # For YAML configuration files
        "shapely>=2.0.0",   # For region polygons
        "gsw>=3.6.0",       # For seawater properties (TEOS-10)
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
            'mypy>=1.0.0',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
