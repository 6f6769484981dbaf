from setuptools import find_packages, setup


extras_require = {}

extras_require["test"] = [
    'pytest>=7.4',
    'pytest-mock>=3.12',
]


setup(
    name='churchorg',
    version='0.3.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    license='MIT',
    description='Organization chart, rosters and statistics for church administration',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',
    install_requires=[
        'supabase>=2.10,<3.0',
        'postgrest>=0.18',
        'httpx>=0.26',
        'python-dotenv>=1.0.0,<2.0',
        'python-dateutil>=2.8',
    ],
    extras_require=extras_require,
    python_requires=">=3.10"
)
