"""
fixture_model.py - in memory model of a typo3/testing-framework
XML fixture: tables of rows of column -> text values
"""

from collections import namedtuple, OrderedDict

Location = namedtuple('Location', 'line column')


class FixtureError(Exception):
    """Base class for conversion failures"""


class ParseError(FixtureError):
    """Input could not be turned into a Dataset"""

    def __init__(self, message, location=None):
        self.location = location
        if location is not None:
            message = "%s at line %s, column %s" % (
                message, location.line, location.column)
        FixtureError.__init__(self, message)


class MalformedError(ParseError):
    """Input is not well-formed XML"""


class UnsupportedError(ParseError):
    """Input uses a construct the conversion refuses to guess about

    `feature` names the construct, e.g. 'CDATA' or 'attribute'
    """

    def __init__(self, feature, location=None, detail=None):
        self.feature = feature
        message = "unsupported %s" % feature
        if detail:
            message += " (%s)" % detail
        ParseError.__init__(self, message, location)


class EmitError(FixtureError):
    """CSV could not be written"""


def column_set(rows):
    """
    column_set - union of column names over rows, first seen first

    :param list rows: rows, each an ordered mapping column -> value
    :return: column names
    :rtype: [str,...]
    """
    columns = OrderedDict()
    for row in rows:
        for name in row:
            columns.setdefault(name, None)
    return list(columns)


class Table(object):
    """Rows read for one table name, in document order"""

    def __init__(self, name):
        if not name:
            raise ValueError("table name must not be empty")
        self.name = name
        self.rows = []

    def add_row(self, row):
        self.rows.append(row)

    def column_set(self):
        return column_set(self.rows)

    def __repr__(self):
        return "<Table %s, %d rows>" % (self.name, len(self.rows))


class Dataset(object):
    """Tables keyed by name, in order of first appearance"""

    def __init__(self):
        self._tables = OrderedDict()

    def add_table(self, name):
        """Return the table called `name`, creating it on first use"""
        table = self._tables.get(name)
        if table is None:
            table = self._tables[name] = Table(name)
        return table

    @property
    def tables(self):
        return list(self._tables.values())

    def __getitem__(self, name):
        return self._tables[name]

    def __contains__(self, name):
        return name in self._tables

    def __iter__(self):
        return iter(self._tables.values())

    def __len__(self):
        return len(self._tables)
