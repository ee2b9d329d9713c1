[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lumentrace"
version = "0.1.0"
description = "Building blocks for a physically based ray tracer: triangle meshes, spot lights, kd-trees, image textures and homogeneous media."
requires-python = ">=3.10"
keywords = ["ray tracing", "rendering", "kd-tree", "participating media", "textures"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["lumentrace"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
