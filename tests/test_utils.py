from utils import get_env_var, get_table_path, read_binary_table


def test_get_env_var(monkeypatch):
    monkeypatch.setenv('EXTAB_TEST_VAR', 'value')
    assert get_env_var('EXTAB_TEST_VAR') == 'value'

    monkeypatch.setenv('EXTAB_TEST_VAR', '')
    assert get_env_var('EXTAB_TEST_VAR', 'default') == 'default'


def test_table_path_from_env(monkeypatch):
    monkeypatch.setenv('EXTAB_TABLE', '/tmp/table.s')
    assert get_table_path() == '/tmp/table.s'


def test_table_path_default(monkeypatch, tmp_path):
    monkeypatch.delenv('EXTAB_TABLE', raising=False)
    monkeypatch.chdir(tmp_path)
    assert get_table_path() is None

    (tmp_path / 'extab.s').write_text('.4byte 0x0\n')
    assert get_table_path() == 'extab.s'


def test_read_binary_table(tmp_path):
    path = tmp_path / 'extab.bin'
    path.write_bytes(b'\x00\x01\x02')
    assert read_binary_table(path) == b'\x00\x01\x02'
