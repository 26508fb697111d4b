from sqlalchemy import select
from sqlalchemy.orm import Session

from bulkmod.cli.create_user import main
from bulkmod.database import build_engine
from bulkmod.models import User


def read_users(url):
    engine = build_engine(url)
    try:
        with Session(engine) as db:
            return db.execute(select(User)).scalars().all()
    finally:
        engine.dispose()


def test_create_user_from_flags(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'users.db'}"

    code = main([
        "--username", "alex",
        "--email", "alex@test.com",
        "--password", "emeralds1",
        "--database-url", url,
    ])

    assert code == 0
    assert "Created user 'alex'" in capsys.readouterr().out
    users = read_users(url)
    assert [u.username for u in users] == ["alex"]
    assert users[0].check_password("emeralds1")


def test_create_user_prompts_for_missing_values(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'users.db'}"
    answers = iter(["alex", "alex@test.com"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
    monkeypatch.setattr("getpass.getpass", lambda prompt: "emeralds1")

    assert main(["--database-url", url]) == 0
    assert [u.email for u in read_users(url)] == ["alex@test.com"]


def test_create_user_rejects_duplicates(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'users.db'}"
    args = ["--email", "alex@test.com", "--password", "emeralds1", "--database-url", url]

    assert main(["--username", "alex", *args]) == 0
    assert main(["--username", "alex2", *args]) == 1
    assert "already taken" in capsys.readouterr().err
    assert len(read_users(url)) == 1


def test_create_user_requires_all_fields(tmp_path, monkeypatch, capsys):
    url = f"sqlite:///{tmp_path / 'users.db'}"
    monkeypatch.setattr("builtins.input", lambda prompt: "  ")
    monkeypatch.setattr("getpass.getpass", lambda prompt: "")

    assert main(["--database-url", url]) == 1
    assert "required" in capsys.readouterr().err
