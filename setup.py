import pathlib
import re
import sys

from setuptools import setup

if sys.version_info < (3, 9):
    raise RuntimeError("rawcookie requires Python 3.9+")


HERE = pathlib.Path(__file__).parent


def read_requirements(name: str) -> list:
    reqs = []
    for line in (HERE / "requirements" / name).read_text().splitlines():
        line = line.strip()
        if not line or line.startswith(("#", "-r")):
            continue
        reqs.append(line)
    return reqs


txt = (HERE / "rawcookie" / "__init__.py").read_text("utf-8")
try:
    version = re.findall(r'^__version__ = "([^"]+)"\r?$', txt, re.M)[0]
except IndexError:
    raise RuntimeError("Unable to determine version.")


setup(
    name="rawcookie",
    version=version,
    description="HTTP cookie header parsing and Set-Cookie serialization",
    long_description=(HERE / "README.rst").read_text("utf-8"),
    long_description_content_type="text/x-rst",
    license="Apache-2.0",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Internet :: WWW/HTTP",
    ],
    python_requires=">=3.9",
    packages=["rawcookie"],
    install_requires=read_requirements("runtime-deps.in"),
    extras_require={"test": read_requirements("test.in")},
    zip_safe=False,
)
