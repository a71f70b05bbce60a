from setuptools import setup, find_packages

setup(
    name='flowsheet',
    version='1.0.0',
    description='Resolution engine for flow sheets: values, colors, variants and translations',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'PyYAML>=6.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'flowsheet.sheet_parser': [
            'yaml = sheet_parser_yaml.plugin:YamlSheetParserPlugin',
            'json = sheet_parser_json.plugin:JsonSheetParserPlugin',
        ],
    },
    python_requires='>=3.10',
)
