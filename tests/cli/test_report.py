import csv
import json
from k21.report import main

def _write(p, texts):
    p.write_text(json.dumps({"success": True, "result": [{"ocr_text": t} for t in texts]}))

def test_per_file_json(tmp_path, capsys):
    _write(tmp_path / "a.json", ["cat dog", "cat"])
    _write(tmp_path / "b.json", ["Fish, fish!"])
    rc = main([str(tmp_path), "--json"])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert [r["top"] for r in out] == [[["cat", 2], ["dog", 1]], [["fish", 2]]]

def test_combined_and_csv(tmp_path, capsys):
    _write(tmp_path / "a.json", ["cat dog"])
    _write(tmp_path / "b.json", ["dog cat cat"])
    outp = tmp_path / "out" / "freq.csv"
    rc = main([str(tmp_path / "a.json"), str(tmp_path / "b.json"), "--combined", "--top", "1",
               "--out-csv", str(outp)])
    assert rc == 0
    rows = list(csv.DictReader(outp.open()))
    assert rows == [{"source": "combined", "rank": "1", "word": "cat", "count": "3"}]
    assert "cat" in capsys.readouterr().out

def test_sample_input(capsys):
    rc = main(["sample:1", "--json", "--top", "1"])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out == [{"source": "sample:1", "top": [["400", 6]]}]

def test_skips_unreadable(tmp_path, capsys):
    (tmp_path / "bad.json").write_text("{not json")
    _write(tmp_path / "good.json", ["ok"])
    rc = main([str(tmp_path), "--json"])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert len(out) == 1 and out[0]["top"] == [["ok", 1]]

def test_no_inputs(tmp_path):
    assert main([str(tmp_path / "missing.json")]) == 2

def test_bad_top(tmp_path):
    _write(tmp_path / "a.json", ["x"])
    assert main([str(tmp_path / "a.json"), "--top", "0"]) == 2
