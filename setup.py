from setuptools import setup

setup(
    name="strictread",
    version="1.0.0",
    author="Kashif Razzaqui",
    author_email="kashif.razzaqui@gmail.com",
    description=(
        "Wraps byte sources that may return data and an error in the same read so callers only ever "
        "see one or the other. Also provides read_into, which sizes a reusable buffer to the bytes read."
    ),
    packages=["strictread"],
    install_requires=["cffi>=1.15.0"],
)
