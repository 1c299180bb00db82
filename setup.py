from setuptools import setup, find_packages

setup(
    name="leaflet-widget",
    version="0.1.0",
    description="Build Leaflet map widgets and live map updates from Python",
    author="Your Name",
    packages=find_packages(exclude=["tests", "scripts"]),
    package_data={"leaflet_widget.providers": ["catalog.yml"]},
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.21.0",
        "pyyaml>=5.4.0",
        "matplotlib>=3.5.0",
        "seaborn>=0.11.0",
    ],
    extras_require={
        "dev": ["pytest>=6.2.0", "black>=21.0", "flake8>=3.9.0"],
    },
)
