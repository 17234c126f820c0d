[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agbtools"
version = "0.1.0"
description = "Asset conversion tools for handheld game builds: tile graphics, palettes, fonts, LZ/RL compression, AIFF samples and C arrays"
requires-python = ">=3.10"
dependencies = []
keywords = ["gba", "graphics", "palette", "lz77", "run-length", "aiff", "tiles", "font", "png"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gbagfx = "agbtools.gbagfx:main"
aif2pcm = "agbtools.aif2pcm:main"
bin2c = "agbtools.bin2c:main"

[tool.hatch.build.targets.wheel]
packages = ["agbtools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
