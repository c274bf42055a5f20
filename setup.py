from setuptools import setup, find_packages

setup(
    name="lambda-prune",
    version="0.1.0",
    packages=find_packages(exclude=["lambda_prune.tests"]),
    py_modules=["cli"],
    install_requires=[
        "boto3",
        "botocore",
        "PyYAML",
    ],
    extras_require={
        "test": [
            "pytest",
            "moto[awslambda,iam]>=5",
        ],
    },
    entry_points={
        'console_scripts': [
            'lprune=cli:main',
        ],
    },
    author="ecaa",
    description="Prune stale AWS Lambda function and layer versions",
    python_requires='>=3.8',
)
