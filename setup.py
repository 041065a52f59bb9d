"""
python -m build
twine upload dist/*
"""

from setuptools import setup, find_packages


def plumpapi_setup():
    with open("requirements.txt", "rt") as fp:
        install_requires = fp.read().strip().split("\n")

    version = "1.0.0"

    setup(
        name="plumpapi",
        packages=find_packages(exclude=["tests", "tests.*"]),
        version=version,
        license="MIT",
        description="plumpapi : CRUD and relationship routes for plump models on FastAPI",
        long_description=open("README.rst").read(),
        keywords=["FastAPI", "REST", "CRUD", "pydantic", "OpenAPI"],
        python_requires=">=3.8, <4",
        install_requires=install_requires,
        classifiers=[
            "Development Status :: 3 - Alpha",
            "License :: OSI Approved :: MIT License",
            "Intended Audience :: Developers",
            "Framework :: FastAPI",
            "Topic :: Software Development :: Libraries",
            "Environment :: Web Environment",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.8",
        ],
        extras_require={"test": ["pytest>=7.0", "pytest-asyncio>=0.21", "httpx>=0.24"]},
    )


plumpapi_setup()  # pragma: no cover
