from setuptools import setup, find_packages

setup(
    name="tasknest",
    version="0.1.0",
    packages=find_packages(include=["tasknest", "tasknest.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "psycopg2-binary",
        "passlib[bcrypt]",
        "bcrypt==4.0.1",
        "python-multipart",
        "python-dotenv",
        "pydantic[email]>=2",
        "pydantic-settings",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
