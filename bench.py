"""Time the clustering kernels.

Benchmarks are described in YAML files. Each mapping is a task; its `setup`,
`stmt` and `base` entries are appended to those of the enclosing task and the
`common` entry is shared by all its subtasks. A task with a `base` statement
is reported as a ratio to it.

    single:
      setup: |
        import numpy as np
        from hcluster_numba.cluster import linkage
        y = np.random.rand(200 * 199 // 2)
      stmt: linkage(y, 'single')
"""

import collections
import fnmatch
import logging
import os
from timeit import Timer

import yaml

logger = logging.getLogger(__name__)

_RESERVED = ('stmt', 'setup', 'number', 'repeat', 'common', 'base')

Result = collections.namedtuple('Result', 'name time base')

_CACHE = {}


_UNITS = ((1e-9, 'ns'), (1e-6, 'us'), (1e-3, 'ms'))


def humanize_time(dt_seconds):
    for value, unit in _UNITS:
        if dt_seconds < 500 * value:
            return '%.2f%s' % (dt_seconds / value, unit)

    return '%.2fs' % dt_seconds


def ordered_load(stream, Loader=yaml.SafeLoader,
                 object_pairs_hook=collections.OrderedDict):
    class OrderedLoader(Loader):
        pass

    def construct_mapping(loader, node):
        loader.flatten_mapping(node)
        return object_pairs_hook(loader.construct_pairs(node))
    OrderedLoader.add_constructor(
        yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
        construct_mapping)
    return yaml.load(stream, OrderedLoader)


def timeit(stmt='pass', setup='pass', number=0, repeat=3):
    """Timer function with the same behaviour as running `python -m timeit `
    in the command line.

    The first runs of a statement also pay for numba compilation, so put a
    warm-up call in `setup` when that should not be measured.

    :return: best elapsed time in seconds or NaN if the command failed.
    :rtype: float
    """

    setup = setup or 'pass'
    stmt = stmt or 'pass'

    key = (stmt, setup, number, repeat)

    if key in _CACHE:
        return _CACHE[key]

    t = Timer(stmt, setup)

    if not number:
        # determine number so that 0.2 <= total time < 2.0
        for i in range(0, 10):
            number = 10**i

            try:
                x = t.timeit(number)
            except Exception:
                t.print_exc()
                return float('NaN')

            if x >= 0.2:
                break

    try:
        r = t.repeat(repeat, number)
    except Exception:
        t.print_exc()
        return float('NaN')

    result = min(r) / number

    _CACHE[key] = result

    return result


def based_timeit(stmt='pass', setup='pass', number=0, repeat=3, base=''):
    if base:
        base_dt = timeit(base, setup, number, repeat)
    else:
        base_dt = None

    dt = timeit(stmt, setup, number, repeat)

    return dt, base_dt


def _join(parent_task, task, key):
    return (parent_task.get(key, '') + '\n' +
            task.get('common', {}).get(key, '') + '\n' +
            task.get(key, '')).strip('\n')


def build_task(task, parent_task):
    """Merge a task with the statements inherited from its parent."""
    return {'setup': _join(parent_task, task, 'setup'),
            'stmt': _join(parent_task, task, 'stmt'),
            'base': _join(parent_task, task, 'base'),
            'number': task.get('number', parent_task.get('number', 0)),
            'repeat': task.get('repeat', parent_task.get('repeat', 3))}


def time_task(name, content, parent_task):
    task = build_task(content, parent_task)

    if 'stmt' in content or 'setup' in content:
        yield Result(name, *based_timeit(**task))

    for sub_name, sub_content in content.items():

        if sub_name in _RESERVED:
            continue

        for result in time_task(name + (sub_name, ), sub_content, task):
            yield result


def time_file(filename, number=None, repeat=None):
    """Open a yaml benchmark file and time each statement.

    `number` and `repeat`, when given, apply to every task of the file
    unless the task sets its own.

    Yields a Result with the task name, time in seconds and base time.
    """
    with open(filename, 'r') as fp:
        content = ordered_load(fp)

    defaults = {}
    if number is not None:
        defaults['number'] = number
    if repeat is not None:
        defaults['repeat'] = repeat

    logger.debug('time_file: %s', filename)
    for result in time_task((), content, defaults):
        yield result


def recursive_glob(rootdir='.', pattern='*'):
    """Return a list of files matching the pattern.
    """
    return [os.path.join(folder, filename)
            for folder, _, filenames in os.walk(rootdir)
            for filename in filenames
            if fnmatch.fnmatch(filename, pattern)]


def format_result(result):
    name = ' > '.join(result.name)
    if result.base is None:
        return '%-40s\t\t%s' % (name, humanize_time(result.time))
    return '%-40s\t\t%.2fx (base %s)' % (name, result.time / result.base,
                                         humanize_time(result.base))


def main(args=None):
    import argparse

    parser = argparse.ArgumentParser(description='Time the clustering kernels.')
    parser.add_argument('filenames', nargs='*',
                        help='Filenames to be benched.\n'
                             'If none is provided, a discovery will be tried.')
    parser.add_argument('-s', '--start-directory', default='.', dest='start',
                        help="Directory to start discovery ('.' default)")
    parser.add_argument('-p', '--pattern', default='bench*.yaml',
                        help="Pattern to match tests ('bench*.yaml' default)")
    parser.add_argument('-n', '--number', type=int, default=None,
                        help='Executions per timing (automatic by default)')
    parser.add_argument('-r', '--repeat', type=int, default=None,
                        help='Timings per statement, the best is kept')

    args = parser.parse_args(args)

    if not args.filenames:
        args.filenames = recursive_glob(args.start, args.pattern)

    print()

    cwd = os.getcwd()

    for filename in args.filenames:
        folder, filename = os.path.split(filename)
        if folder:
            os.chdir(folder)
        try:
            print(filename)
            print('-' * len(filename))
            print()
            for result in time_file(filename, args.number, args.repeat):
                print(format_result(result))
            print()
        finally:
            os.chdir(cwd)


if __name__ == '__main__':
    main()
