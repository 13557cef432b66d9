import setuptools
import os

own_dir = os.path.abspath(os.path.dirname(__file__))


def requirements():
    with open(os.path.join(own_dir, 'requirements.txt')) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            yield line


def modules():
    return [
        'gitutil',
        'version',
    ]


def packages():
    return setuptools.find_packages(include=['release_range', 'release_range.*'])


def version():
    with open(os.path.join(own_dir, 'VERSION')) as f:
        return f.read().strip()


setuptools.setup(
    name='release-range',
    version=version(),
    description='Determines the commits on the default branch since the latest semver release-tag',
    python_requires='>=3.11',
    py_modules=modules(),
    packages=packages(),
    package_data={
        '':['VERSION'],
    },
    install_requires=list(requirements()),
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'release-range = release_range.cli:main'
        ],
    },
)
