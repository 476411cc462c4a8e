from setuptools import setup, find_packages
import os

# Read the long description from README.md if it exists
long_description = ""
if os.path.isfile("README.md"):
    with open("README.md", "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name='histomorph',
    version='0.1.0',
    packages=find_packages(include=['histomorph', 'histomorph.*']),
    author='Your Name',
    author_email='your.email@example.com',
    description='Dynamic histomorphometry of fluorescently double-labeled bone sections',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='GPLv3',
    keywords=['histomorphometry', 'bone', 'fluorochrome labels', 'mineral apposition rate'],
    url='https://github.com/YourUsername/histomorph',  # Update to your project URL

    # These are the runtime dependencies for your package:
    install_requires=[
        'numpy>=1.18.0',
        'scipy>=1.4.0',
        'pandas>=1.0.0',
        'matplotlib>=3.0.0',
        'PyYAML>=5.1',
    ],
    extras_require={
        'test': ['pytest>=6.0'],
    },
    entry_points={
        'console_scripts': ['histomorph=histomorph.cli:main'],
    },

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Topic :: Scientific/Engineering :: Medical Science Apps.',
        'Topic :: Scientific/Engineering :: Image Processing',
    ],

    python_requires='>=3.9',
    include_package_data=True,
    zip_safe=False,
)
