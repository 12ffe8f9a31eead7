"""
xml2csv.py - convert typo3/testing-framework XML fixtures to CSV

    xml2csv -i fixture.xml -d fixtures/
        one fixtures/<table>.csv per table

    xml2csv --layout record --format typo3 < fixture.xml > fixture.csv
        one CSV in the format the testing framework imports
"""

import argparse
import io
import os
import sys

from fixture_csv import write_table, write_typo3
from fixture_model import FixtureError
from fixture_xml import LAYOUTS, read_dataset

FORMATS = ['tables', 'typo3']

# exit status for conversion failures, argparse uses 2 for usage errors
EXIT_FAILURE = 10


def make_parser():
    """Return an argparse parser"""

    parser = argparse.ArgumentParser(
        prog='xml2csv',
        description="""Convert typo3/testing-framework XML fixtures to CSV""",
    )

    parser.add_argument('-i', '--input-file', type=str,
        help="XML fixture to read, stdin if omitted"
    )

    parser.add_argument('-o', '--output-file', type=str,
        help="file for --format typo3 output, stdout if omitted"
    )

    parser.add_argument('-d', '--output-dir', type=str, default='.',
        help="folder for --format tables output, one <table>.csv per table"
    )

    parser.add_argument("--layout", choices=list(LAYOUTS), default='nested',
        help="'nested': table elements hold row elements, "
             "'record': each table element is one row, as the testing "
             "framework writes fixtures"
    )

    parser.add_argument("--format", choices=FORMATS, default='tables',
        help="'tables': one CSV per table, "
             "'typo3': all tables in one testing framework CSV"
    )

    parser.add_argument("--append", action='store_true',
        help="append to --output-file instead of replacing it, "
             "--format typo3 only"
    )

    parser.add_argument("-q", "--quiet", action='store_true',
        help="don't list tables on stderr as they're written"
    )

    return parser


def open_output(opt, filename):
    return open(filename, 'a' if opt.append else 'w',
                encoding='utf-8', newline='')


def dump_tables(opt, dataset):
    """
    dump_tables - write each table to <output_dir>/<table>.csv

    :param argparse Namespace opt: options
    :param fixture_model.Dataset dataset: tables to write
    """
    if not os.path.isdir(opt.output_dir):
        os.makedirs(opt.output_dir)

    for table in dataset:
        if not opt.quiet:
            sys.stderr.write("%s\n" % table.name)
        with open_output(opt, os.path.join(opt.output_dir, table.name+'.csv')) as output:
            write_table(table, output)


def dump_typo3(opt, dataset):
    """Write all tables to --output-file, or stdout, as one CSV"""
    if opt.output_file is None:
        # same encoding and line endings as a file, whatever the locale
        sys.stdout.flush()
        output = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8',
                                  newline='')
        try:
            write_typo3(dataset, output)
            output.flush()
        finally:
            output.detach()
        return

    with open_output(opt, opt.output_file) as output:
        write_typo3(dataset, output)


def load_dataset(opt):
    """Read the fixture named by --input-file, or stdin"""
    if not opt.input_file:
        return read_dataset(sys.stdin.buffer, opt.layout)
    with open(opt.input_file, 'rb') as source:
        return read_dataset(source, opt.layout)


def main(argv=None):

    parser = make_parser()
    opt = parser.parse_args(argv)
    # a second header line would land mid-file in a per table CSV
    if opt.append and opt.format != 'typo3':
        parser.error("--append needs --format typo3")

    try:
        dataset = load_dataset(opt)
        if opt.format == 'typo3':
            dump_typo3(opt, dataset)
        else:
            dump_tables(opt, dataset)
    except (FixtureError, OSError) as exc:
        sys.stderr.write("xml2csv: error: %s\n" % exc)
        return EXIT_FAILURE

    return 0


if __name__ == '__main__':
    sys.exit(main())
