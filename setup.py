from setuptools import setup

setup(
    name="spn_cryptanalysis",
    version="0.1.0",
    description="Toy 16-bit SPN cipher with linear and differential key-nibble recovery",
    author="Your Name",
    author_email="your.email@example.com",
    license="MIT",
    packages=["src"],
    py_modules=["config"],
    install_requires=[
        "numpy",
        "scipy",
        "matplotlib",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers=[
        "Programming Language :: Python :: 3.10",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "spn-attacks=src.main:main"
        ]
    },
)
