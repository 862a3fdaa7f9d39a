from pathlib import Path

from setuptools import find_packages, setup  # isort: skip


HERE = Path(__file__).resolve().parent


def get_version():
    scope = {}
    exec((HERE / "cattrace" / "_version.py").read_text(), scope)
    return scope["__version__"]


setup(
    name="cattrace",
    version=get_version(),
    description="Cross application tracing: link transactions across instrumented services",
    packages=find_packages(exclude=["tests*"]),
    python_requires=">=3.9",
    install_requires=[
        "envier>=0.5,<1",
    ],
    extras_require={
        "tests": [
            "pytest",
            "mock",
        ],
    },
    zip_safe=False,
)
