"""
fixture_csv.py - write fixture_model tables as CSV

Two outputs:

- one CSV per table, header line of column names then one line per row
- the combined format typo3/testing-framework reads: table name line,
  header line and row lines for every table in one file, with an empty
  first field on header and row lines

Fields are quoted only when they contain a comma, double quote, CR or LF.
Lines end with CRLF.
"""

import csv
import io
import sys

from fixture_model import EmitError

LINE_TERMINATOR = '\r\n'

# typo3/testing-framework requires the first value of a record to be
# non-empty, so the uid column goes first
UID_COLUMN = 'uid'


def make_writer(output):
    return csv.writer(output, quoting=csv.QUOTE_MINIMAL,
                      lineterminator=LINE_TERMINATOR)


def write_records(records, output):
    """Write lists of str to `output`, sink failures become EmitError"""
    writer = make_writer(output)
    try:
        for record in records:
            writer.writerow(record)
    except OSError as exc:
        raise EmitError("failed to write csv: %s" % exc)


def table_records(table):
    """Header then one record per row, nothing for a table without columns"""
    columns = table.column_set()
    if not columns:
        return
    yield columns
    for row in table.rows:
        yield [row.get(i, '') for i in columns]


def write_table(table, output):
    """
    write_table - write one table as CSV

    :param fixture_model.Table table: table to write
    :param file output: text file opened with newline=''
    """
    write_records(table_records(table), output)


def emit(table):
    """Return CSV text for one table"""
    output = io.StringIO()
    write_table(table, output)
    return output.getvalue()


def typo3_columns(table):
    """
    typo3_columns - column set of `table` with uid swapped into first place

    :param fixture_model.Table table: table with at least one row
    :return: column names
    :rtype: [str,...]
    :raises EmitError: a row has no uid
    """
    for row_n, row in enumerate(table.rows):
        if UID_COLUMN not in row:
            raise EmitError("row %d of table %s has no %s column" % (
                row_n + 1, table.name, UID_COLUMN))

    columns = table.column_set()
    uid_position = columns.index(UID_COLUMN)
    columns[0], columns[uid_position] = columns[uid_position], columns[0]
    return columns


def write_typo3(dataset, output):
    """
    write_typo3 - write all tables as one typo3/testing-framework CSV

    Every line is padded to the width of the widest table. Tables
    without rows are left out. All tables are checked before anything
    is written.

    :param fixture_model.Dataset dataset: tables to write
    :param file output: text file opened with newline=''
    :return: number of tables written
    :rtype: int
    """
    if not len(dataset):
        sys.stderr.write(
            "Warning: dataset is empty. Nothing will be written.\n")
        return 0

    tables = [(table, typo3_columns(table)) for table in dataset if table.rows]
    if not tables:
        sys.stderr.write(
            "Warning: No columns used in any element. Nothing will be written.\n")
        return 0

    width = 1 + max(len(columns) for table, columns in tables)

    def pad(record):
        return record + [''] * (width - len(record))

    def records():
        for table, columns in tables:
            yield pad([table.name])
            yield pad([''] + columns)
            for row in table.rows:
                yield pad([''] + [row.get(i, '') for i in columns])

    write_records(records(), output)
    return len(tables)


def emit_typo3(dataset):
    """Return typo3/testing-framework CSV text for the whole dataset"""
    output = io.StringIO()
    write_typo3(dataset, output)
    return output.getvalue()
