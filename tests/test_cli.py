import pytest

from bytoken import ByToken, ConfigurationError
from bytoken import bench, train_bpe

from .conftest import CORPUS


@pytest.fixture
def corpus_file(tmp_path):
    path = tmp_path / "corpus.txt"
    path.write_text(CORPUS, encoding="utf-8")
    return path


def test_train_cli(tmp_path, corpus_file, capsys):
    out = tmp_path / "runs" / "tok.json"
    train_bpe.main(["--text", str(corpus_file), "--size", "20", "--out", str(out)])
    assert "[tokenizer] saved" in capsys.readouterr().out
    tok = ByToken.load(out)
    assert len(tok) == 12
    assert tok.encode(CORPUS) == [11]


def test_train_cli_rejects_small_size(tmp_path, corpus_file):
    with pytest.raises(ConfigurationError):
        train_bpe.main(["--text", str(corpus_file), "--size", "3", "--out", str(tmp_path / "t.json")])
    assert not (tmp_path / "t.json").exists()


def test_bench_run(tmp_path, capsys):
    out = tmp_path / "bench" / "enc.json"
    stats = bench.run(CORPUS * 3, 20, 5, str(out), verbose=False)
    assert stats["vocab"] == len(ByToken.load(out))
    assert "reloads with identical encodings" in capsys.readouterr().out


def test_bench_main(tmp_path, corpus_file, capsys):
    out = tmp_path / "enc.json"
    bench.main(["--text", str(corpus_file), "--iterations", "3", "--out", str(out), "--quiet"])
    printed = capsys.readouterr().out
    assert "Training completed" in printed
    assert out.exists()


def test_bench_from_saved_tokenizer(tmp_path, saved, trained, capsys):
    out = tmp_path / "again.json"
    bench.main(["--load", str(saved), "--iterations", "2", "--out", str(out)])
    printed = capsys.readouterr().out
    assert "[tokenizer] loaded" in printed
    assert "Training completed" not in printed
    assert ByToken.load(out).encode(CORPUS) == trained.encode(CORPUS)


def test_bench_needs_a_source(capsys):
    with pytest.raises(SystemExit):
        bench.main(["--iterations", "1"])
