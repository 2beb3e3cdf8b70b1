import math

import bench


class TestBench:

    def test_humanize_time(self):
        assert bench.humanize_time(2e-7) == '200.00ns'
        assert bench.humanize_time(3e-3) == '3.00ms'
        assert bench.humanize_time(1.5) == '1.50s'

    def test_build_task(self):
        parent = {'setup': 'a = 1', 'stmt': '', 'base': '', 'number': 5,
                  'repeat': 3}
        task = bench.build_task({'setup': 'b = 2',
                                 'common': {'setup': 'c = 3'}}, parent)
        assert task['setup'] == 'a = 1\nc = 3\nb = 2'
        assert task['number'] == 5
        assert task['repeat'] == 3

    def test_time_file(self, tmp_path):
        path = tmp_path / 'bench_small.yaml'
        path.write_text('task:\n'
                        '  setup: x = 2\n'
                        '  number: 1\n'
                        '  repeat: 1\n'
                        '  square:\n'
                        '    stmt: x * x\n'
                        '    base: x + x\n'
                        '  broken:\n'
                        '    stmt: undefined_name\n')
        results = {r.name: r for r in bench.time_file(str(path))}
        assert set(results) == {('task', ), ('task', 'square'),
                                ('task', 'broken')}
        assert results[('task', 'square')].time >= 0
        assert results[('task', 'square')].base is not None
        assert math.isnan(results[('task', 'broken')].time)
        assert bench.format_result(results[('task', 'square')]).startswith(
            'task > square')

    def test_recursive_glob(self, tmp_path):
        (tmp_path / 'sub').mkdir()
        (tmp_path / 'sub' / 'bench_a.yaml').write_text('{}')
        (tmp_path / 'other.yaml').write_text('{}')
        found = bench.recursive_glob(str(tmp_path), 'bench*.yaml')
        assert [p.endswith('bench_a.yaml') for p in found] == [True]
