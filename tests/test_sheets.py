from unittest import mock

import requests

from sheets import get_experiences, rows_to_experiences


def test_rows_with_spanish_headers():
    values = [
        ["Titulo", "Descripcion", "Calificacion", "Autor"],
        ["Increíble", "Muy bueno", "4", "Ana"],
        ["", "sin título", "5", "Nadie"],
        ["Corta"],
    ]
    experiences = rows_to_experiences(values)
    assert [e.title for e in experiences] == ["Increíble", "Corta"]
    assert experiences[0].rating == 4
    assert experiences[0].author == "Ana"
    assert experiences[1].rating == 5
    assert experiences[1].id == "exp-3"


def test_rows_without_data():
    assert rows_to_experiences(None) == []
    assert rows_to_experiences([["title"]]) == []


def test_get_experiences_from_sheet(app):
    app.config.update(SHEETS_API_KEY="key", SHEETS_SPREADSHEET_ID="sheet-1")
    with mock.patch("sheets.requests.get") as get:
        get.return_value.json.return_value = {"values": [["id", "title"], ["e1", "Hola"]]}
        experiences = get_experiences()

    assert [e.id for e in experiences] == ["e1"]
    args, kwargs = get.call_args
    assert args[0].endswith("/sheet-1/values/Experience")
    assert kwargs["params"] == {"key": "key"}


def test_get_experiences_falls_back_on_error(app):
    app.config.update(SHEETS_API_KEY="key", SHEETS_SPREADSHEET_ID="sheet-1")
    with mock.patch("sheets.requests.get", side_effect=requests.ConnectionError("offline")):
        experiences = get_experiences()
    assert [e.id for e in experiences] == ["exp1", "exp2", "exp3"]
