import setuptools

with open("cuesheet/.version") as f:
    version = f.read().strip()

setuptools.setup(
    name="cuesheet",
    version=version,
    python_requires=">=3.11.0",
    author="blissful",
    author_email="blissful@sunsetglow.net",
    license="Apache-2.0",
    entry_points={"console_scripts": ["cuesheet = cuesheet.__main__:main"]},
    packages=["cuesheet"],
    package_data={"cuesheet": [".version", "py.typed"]},
    install_requires=[
        "appdirs",
        "click",
        "jinja2",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
