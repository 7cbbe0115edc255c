"""
Subway Route Planner - Build Script

This script packages the route_planner application (FastAPI service and
pathfinding algorithms) together with the bundled sample catalog.
"""

from setuptools import setup, find_packages


setup(
    name='subway-route-planner',
    version='1.0.0',
    author='Subway Route Planner Team',
    description='Fastest-route and disruption-aware alternative-route engine for subway networks',
    long_description='''
    Dijkstra over (station, line) nodes with transfer penalties, and
    Yen's k-shortest simple paths for ranked alternatives that avoid
    disrupted lines. Served over HTTP with FastAPI.
    ''',
    packages=find_packages(include=['route_planner', 'route_planner.*']),
    package_data={
        'route_planner': ['data/*.json'],
    },
    include_package_data=True,
    install_requires=[
        'fastapi>=0.100.0',
        'pydantic>=2.0',
        'python-dotenv>=1.0.0',
        'uvicorn>=0.23.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-mock>=3.10',
            'httpx>=0.24.0',
        ],
    },
    zip_safe=False,
    python_requires='>=3.9',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Scientific/Engineering :: GIS',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Framework :: FastAPI',
    ],
)
