from setuptools import setup, find_packages

setup(
    name="pose-stream",
    version="1.0.0",
    description="Event-driven pose estimation stream adapter over RTMPose",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "opencv-python",
        "numpy",
        "rtmlib",
        "onnxruntime",
        "prometheus-client",
        "PyYAML",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-asyncio",
            "black",
            "isort",
            "flake8",
        ],
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    }
)
