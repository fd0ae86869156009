[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nnkernels"
version = "0.5.0"
description = "Reference CPU kernels for neural-network operators on NumPy float32 arrays, with a small tensor type"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["neural-network", "tensor", "operators", "kernels", "softmax", "rope"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["nnkernels"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
