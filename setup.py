from setuptools import setup, find_packages
from bgzfwalk.__version import __version__

with open('README.md') as readme:
    setup(
        name='bgzfwalk',
        version=__version__,
        packages=find_packages(exclude=('tests', 'tests.*')),
        long_description=readme.read(),
        long_description_content_type='text/markdown',
        license='MIT',
        description='Walks the block structure of BGZF compressed files without inflating them',
        scripts=['tools/blocks.py'],
        python_requires='>=3.6',
        include_package_data=True
    )
