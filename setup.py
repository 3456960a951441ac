from setuptools import setup, find_packages

setup(
    name="tagsel",
    setup_requires=["setuptools_scm"],
    use_scm_version={"fallback_version": "0.1.0"},
    python_requires=">=3.8, <4",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    entry_points={"console_scripts": ["tagsel = tagsel._cli:main"]},
    install_requires=[
        'click>=8.0,<9',
        'pyparsing>=3.0,<4',
    ],
    extras_require={
        'test': ['pytest>=7']
    }
)
