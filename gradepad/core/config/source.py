import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

import gradepad.lib.util as util
from gradepad.model import DeploymentEnvironment


class CurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]


class SettingsCurrentState(CurrentState, total=False):
    override: t.Required[tuple[str, ...]]


SkipKeys = frozenset({"env", "root", "override"})


def env_paths(root: p.AnyUrl, env: DeploymentEnvironment) -> list[Path]:
    assert root.scheme == "file" and root.path is not None, "root is not a legible location of YAML files"
    paths = [Path(root.path)]
    if env is not DeploymentEnvironment.Local:
        # local/ has no directory of its own, it is the root
        paths.append(Path(root.path) / "env.d" / env.value)
    return paths


class SettingsSource(PydanticBaseSettingsSource):
    def __call__(self) -> dict[str, t.Any]:
        # init kwargs carry the config root and env
        data: dict[str, t.Any] = {}

        for field_name, field in self.settings_cls.model_fields.items():
            try:
                field_value, field_key, value_is_complex = self.get_field_value(field, field_name)
                field_value = self.prepare_field_value(field_name, field, field_value, value_is_complex)
            except KeyError:
                continue
            except ValueError as e:
                raise SettingsError(f"error parsing value for field {field_name!r} from source {self!r}") from e
            except Exception as e:
                raise SettingsError(f"error getting value for field {field_name!r} from source {self!r}") from e

            data[field_key] = field_value
        return data


class OverrideSettingsSource(SettingsSource):
    """Applies ``dotted.key=value`` overrides from the command line on top of the YAML cascade."""

    @functools.cached_property
    def parsed_options(self) -> dict[str, t.Any]:
        current_state = t.cast(SettingsCurrentState, self.current_state)
        od: dict[str, t.Any] = {}
        for o in current_state["override"]:
            k, v = util.parse_assignment(o)

            target = od
            path = k.split(".")
            for key in path[:-1]:
                target = target.setdefault(key, {})
            target[path[-1]] = yaml.safe_load(v)
        return od

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> t.Any:
        current_state = t.cast(SettingsCurrentState, self.current_state)
        val = current_state.get(field_name)
        if field_name in self.parsed_options and field_name not in SkipKeys:
            if isinstance(val, dict):
                merged = util.deep_update(t.cast(dict[t.Any, t.Any], val), self.parsed_options[field_name])
                return merged, field_name, True
            return self.parsed_options[field_name], field_name, False
        return val, field_name, False

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        return value


class YAMLCascadingSettingsSource(SettingsSource):
    """Reads ``<field>.yaml`` from the config root, then deep-merges the per-environment copy over it."""

    @functools.cached_property
    def load_paths(self) -> list[Path]:
        current_state = t.cast(SettingsCurrentState, self.current_state)
        return env_paths(current_state["root"], current_state["env"])

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name in SkipKeys:
            raise KeyError(field_name)
        yamls: list[str] = []
        for path in self.load_paths:
            fn = path / f"{field_name}.yaml"
            if fn.exists():
                yamls.append(fn.read_text(encoding="utf8"))
        if not yamls:
            raise KeyError(field_name)
        return yamls, field_name, True

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        if not value_is_complex:
            return super().prepare_field_value(field_name, field, value, value_is_complex)

        # complex values arrive as the list of YAML documents found along load_paths
        if not isinstance(value, list):
            raise ValueError(field_name)
        merged: dict[str, t.Any] = {}
        for doc in t.cast(list[str], value):
            loaded = yaml.safe_load(doc)
            if not isinstance(loaded, dict):
                return loaded
            merged = util.deep_update(merged, t.cast(dict[str, t.Any], loaded))
        return merged


class YAMLSecretsSource(SettingsSource):
    """Reads ``secrets.yaml`` from the environment's config directory, if there is one."""

    @functools.cached_property
    def load_path(self) -> Path:
        current_state = t.cast(CurrentState, self.current_state)
        return env_paths(current_state["root"], current_state["env"])[-1]

    @functools.cached_property
    def secrets(self) -> dict[str, t.Any]:
        sp = self.load_path / "secrets.yaml"
        if not sp.exists():
            return {}
        with sp.open(encoding="utf8") as f:
            return yaml.safe_load(f) or {}

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        # checked before touching self.secrets, which itself needs root and env
        if field_name in SkipKeys or field_name not in self.secrets:
            raise KeyError(field_name)
        val = self.secrets[field_name]
        return val, field_name, isinstance(val, dict)

    def prepare_field_value(
        self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool
    ) -> t.Any:
        return value
