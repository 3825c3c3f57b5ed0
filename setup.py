from setuptools import setup, find_packages

setup(
    name='datecloak',
    version='1.0.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'click>=8.0',
        'jcs>=0.2.1',
        'argon2-cffi>=21.0',
        'cryptography>=41.0',
        'structlog>=23.1',
        'pydantic>=2.0',
        'pydantic-settings>=2.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0',
            'hypothesis>=6.0',
        ]
    },
    entry_points={
        'console_scripts': [
            'datecloak=datecloak.cli:cli',
        ],
    },
    description='Redacted commit dates with the original date kept in an encrypted message trailer',
    long_description='',
    long_description_content_type='text/markdown',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Version Control :: Git',
        'Topic :: Security :: Cryptography',
        'Programming Language :: Python :: 3.8',
    ],
    python_requires='>=3.8',
)
