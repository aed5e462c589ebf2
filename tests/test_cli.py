import json

import pytest

from tally.__main__ import main


def write_program(tmp_path, source, name='prog.tally'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_program_file(tmp_path, capsys):
    path = write_program(tmp_path, 'x = 5; while (x < 10) x = x + 1; x;')
    main([str(path)])
    assert capsys.readouterr().out.strip() == '10'


def test_eval_option(capsys):
    main(['-e', 'true && false'])
    assert capsys.readouterr().out.strip() == 'false'


def test_eval_with_lark_engine(capsys):
    main(['--engine', 'lark', '-e', '7 / 2'])
    assert capsys.readouterr().out.strip() == '3.5'


def test_no_value_prints_nothing(capsys):
    main(['-e', 'if (false) 1'])
    assert capsys.readouterr().out == ''


def test_runtime_error_exits_with_status_1(capsys):
    with pytest.raises(SystemExit) as info:
        main(['-e', 'y;'])
    assert info.value.code == 1
    assert 'UndefinedVariable: undefined variable y' in capsys.readouterr().err


def test_parse_error_exits_with_status_1(capsys):
    with pytest.raises(SystemExit) as info:
        main(['-e', 'x = ;'])
    assert info.value.code == 1
    assert 'UnexpectedToken' in capsys.readouterr().err


def test_iteration_budget_option(capsys):
    with pytest.raises(SystemExit):
        main(['--max-iterations', '5', '-e', 'while (true) 1'])
    assert 'StepLimitExceeded' in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as info:
        main([str(tmp_path / 'nope.tally')])
    assert info.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_emit_and_run_ast(tmp_path, capsys):
    path = write_program(tmp_path, 'a = 2; b = a * 21; b')
    main(['--emit-ast', str(path)])
    out_path = capsys.readouterr().out.strip()
    assert out_path.endswith('prog.tally.ast.json')
    with open(out_path, encoding='utf-8') as f:
        assert json.load(f)["type"] == "Sequence"
    main(['--ast', out_path])
    assert capsys.readouterr().out.strip() == '42'


@pytest.mark.parametrize('content', [
    '{"type": "BooleanLiteral", "value": "false"}',
    '{"type": "Sequence"}',
    '{"type": "ForLoop"}',
    '[1, 2]',
    'not json',
])
def test_malformed_ast_file(tmp_path, capsys, content):
    path = tmp_path / 'bad.ast.json'
    path.write_text(content, encoding='utf-8')
    with pytest.raises(SystemExit) as info:
        main(['--ast', str(path)])
    assert info.value.code == 1
    assert capsys.readouterr().err.startswith('Error: invalid AST file')
