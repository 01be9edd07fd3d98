import json

from typer.testing import CliRunner

from modelfactory import __version__
from modelfactory.main import app

runner = CliRunner()


def test_generate_dry_run_json(temp_project):
    user_dart = temp_project / "lib" / "user.dart"
    result = runner.invoke(
        app,
        ["generate", str(user_dart), "--dry-run", "--json", "--project-root", str(temp_project)],
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout)

    assert payload["command"] == "generate"
    assert payload["status"] == "success"
    assert payload["dry_run"] is True
    assert payload["factory_count"] == 1
    assert payload["issue_count"] == 0

    part = payload["parts"][0]
    assert part["output_file"].endswith("user.factory.g.dart")
    assert part["written"] is False
    assert "class UserFactory {" in part["content"]
    # UserRole lives in role.dart; the project root is scanned for enums
    assert "role: role ?? UserRole.admin," in part["content"]
    assert "UserRoleFactory" not in part["content"]


def test_generate_and_inspect_agree_on_enum_defaults(temp_project):
    user_dart = temp_project / "lib" / "user.dart"
    args = ["--project-root", str(temp_project)]

    generated = runner.invoke(app, ["generate", str(user_dart), "--dry-run", *args])
    inspected = runner.invoke(app, ["inspect", str(user_dart), *args])
    assert generated.exit_code == 0
    assert inspected.exit_code == 0

    content = json.loads(generated.stdout)["parts"][0]["content"]
    fields = {f["name"]: f for f in json.loads(inspected.stdout)["models"][0]["fields"]}
    assert f"role: role ?? {fields['role']['default']}," in content


def test_generate_reports_unreadable_source(temp_project):
    lib = temp_project / "lib"
    (lib / "broken.dart").write_bytes(b"\xff\xfe\x00 not utf-8")

    result = runner.invoke(
        app,
        ["generate", str(lib / "broken.dart"), str(lib / "address.dart"), "--project-root", str(temp_project)],
    )

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["issue_count"] == 1
    assert payload["factory_count"] == 1
    broken = next(p for p in payload["parts"] if p["source_file"].endswith("broken.dart"))
    assert broken["issues"][0]["element_name"] == "broken.dart"
    assert (lib / "address.factory.g.dart").exists()


def test_generate_writes_and_reports_invalid_targets(temp_project):
    lib = temp_project / "lib"
    result = runner.invoke(app, ["generate", str(lib), "--project-root", str(temp_project)])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["status"] == "error"
    assert payload["issue_count"] == 1
    assert payload["factory_count"] == 4
    assert all("content" not in part for part in payload["parts"])
    assert (lib / "person.factory.g.dart").exists()
    assert (lib / "address.factory.g.dart").exists()


def test_generate_cli_defaults_override_config(temp_project):
    address_dart = temp_project / "lib" / "address.dart"
    (temp_project / ".modelfactory").mkdir()
    (temp_project / ".modelfactory" / "config.json").write_text(
        json.dumps({"type_defaults": {"String": "'from config'"}})
    )

    result = runner.invoke(
        app,
        [
            "generate", str(address_dart), "--dry-run",
            "--project-root", str(temp_project),
            "-d", "String='from cli'",
        ],
    )
    assert result.exit_code == 0
    content = json.loads(result.stdout)["parts"][0]["content"]
    assert "street: street ?? 'from cli'," in content


def test_generate_rejects_malformed_default(temp_project):
    result = runner.invoke(
        app,
        ["generate", str(temp_project / "lib"), "-d", "no-equals-sign", "--project-root", str(temp_project)],
    )
    assert result.exit_code == 2
    payload = json.loads(result.stdout)
    assert payload["status"] == "error"
    assert payload["code"] == "INVALID_DEFAULT"


def test_inspect_json(temp_project):
    user_dart = temp_project / "lib" / "user.dart"
    result = runner.invoke(
        app,
        ["inspect", str(user_dart), "--json", "--project-root", str(temp_project)],
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout)

    assert payload["command"] == "inspect"
    user = payload["models"][0]
    assert user["name"] == "User"
    assert user["kind"] == "class"
    assert user["line"] == 11

    fields = {f["name"]: f for f in user["fields"]}
    assert fields["email"] == {
        "name": "email",
        "type": "String?",
        "nullable": True,
        "default": "null",
        "tier": "nullable",
    }
    assert fields["role"]["default"] == "UserRole.admin"
    assert fields["role"]["tier"] == "builtin"
    assert fields["tags"]["type"] == "List<String>"
    assert fields["address"]["tier"] == "nested_model"


def test_config_set_default_then_show(temp_project):
    set_result = runner.invoke(
        app,
        ["config", "set-default", "DateTime", "DateTime(2024)", "--project-root", str(temp_project)],
    )
    assert set_result.exit_code == 0
    assert json.loads(set_result.stdout) == {
        "command": "config.set-default",
        "status": "success",
        "type": "DateTime",
        "code": "DateTime(2024)",
    }

    show_result = runner.invoke(app, ["config", "show", "--project-root", str(temp_project)])
    assert show_result.exit_code == 0
    config = json.loads(show_result.stdout)
    assert config["type_defaults"] == {"DateTime": "DateTime(2024)"}
    assert config["generator"]["respect_gitignore"] is True


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == f"modelfactory v{__version__}"
