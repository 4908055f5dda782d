"""Install the Keyper authentication service."""

from setuptools import setup, find_packages

setup(
    name='keyper',
    version='0.1.0',
    packages=find_packages(exclude=['tests', '*test*']),
    py_modules=['asgi'],
    python_requires='>=3.9',
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "python-json-logger",
        "google-cloud-firestore>=2.11",
        "argon2-cffi",
        "pytz",
    ],
    extras_require={
        'test': [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ]
    },
    zip_safe=False
)
