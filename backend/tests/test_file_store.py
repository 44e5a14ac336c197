from conftest import run


def test_find_by_name_is_scoped_to_project(sql_file_store):
    row = run(sql_file_store.find_by_name(1, "b_alpha.md"))
    assert row.file_id == 2
    assert row.content == "alpha alpha text here"

    other = run(sql_file_store.find_by_name(2, "b_alpha.md"))
    assert other.file_id == 5


def test_find_by_name_ignores_folders(sql_file_store):
    assert run(sql_file_store.find_by_name(1, "chapters")) is None
    assert run(sql_file_store.find_by_name(1, "missing.md")) is None


def test_get_by_ids_keeps_caller_order(sql_file_store):
    rows = run(sql_file_store.get_by_ids([3, 2, 99]))
    assert [r.file_id for r in rows] == [3, 2]
    assert run(sql_file_store.get_by_ids([])) == []


def test_get_by_id(sql_file_store):
    assert run(sql_file_store.get_by_id(3)).name == "a_beta.md"
    assert run(sql_file_store.get_by_id(1)).type == "folder"
    assert run(sql_file_store.get_by_id(42)) is None


def test_list_project_files_orders_by_name_and_limits(sql_file_store):
    rows = run(sql_file_store.list_project_files(1))
    assert [r.name for r in rows] == ["a_beta.md", "b_alpha.md", "empty.md"]

    assert [r.name for r in run(sql_file_store.list_project_files(1, limit=2))] == ["a_beta.md", "b_alpha.md"]
