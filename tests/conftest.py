"""
Shared fixtures: fixture documents built with lxml, the same way
database dumps are written as XML
"""

import pytest
from lxml import etree
from lxml.builder import ElementMaker

E = ElementMaker()


def to_xml(root):
    return etree.tostring(etree.ElementTree(root),
                          encoding='UTF-8', xml_declaration=True)


def nested_document(tables):
    """
    nested_document - <dataset><table><row><column>...

    :param list tables: (table name, [[(column, value),...],...]) pairs
    :return: UTF-8 encoded document
    :rtype: bytes
    """
    dataset = E('dataset')
    for table_name, rows in tables:
        table = E(table_name)
        for row in rows:
            table.append(E('row', *[E(column, value) for column, value in row]))
        dataset.append(table)
    return to_xml(dataset)


def record_document(records):
    """
    record_document - <dataset><table><column>..., one element per row

    :param list records: (table name, [(column, value),...]) pairs
    :return: UTF-8 encoded document
    :rtype: bytes
    """
    dataset = E('dataset')
    for table_name, cells in records:
        dataset.append(E(table_name, *[E(column, value) for column, value in cells]))
    return to_xml(dataset)


@pytest.fixture
def make_nested():
    return nested_document


@pytest.fixture
def make_records():
    return record_document


@pytest.fixture
def typo3_fixture():
    """A small fixture as typo3/testing-framework writes them"""
    return record_document([
        ('pages', [('uid', '1'), ('title', 'Root')]),
        ('tt_content', [('pid', '1'), ('uid', '10'), ('header', 'Hello, world')]),
        ('pages', [('uid', '2'), ('title', 'Sub "page"')]),
    ])
