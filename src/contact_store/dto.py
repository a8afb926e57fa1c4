"""Pydantic models inferred from the SQLAlchemy model type annotations.

Columns are marked for DTO purposes using the `SQLAlchemy.Column.info`
field, which allows demarcation of fields that should always be private,
or read-only at the model declaration layer.

Read DTOs are frozen value records: relationships are rendered as nested
read DTOs, and a relationship leading back to a model already being built
is left out, so the generated models never hold reference cycles. Write
DTOs validate in strict mode, input of the wrong type is rejected rather
than coerced.
"""
from __future__ import annotations

from enum import Enum, auto
from inspect import getmodule, isclass
from types import ModuleType, UnionType
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    ClassVar,
    Generic,
    List,
    NamedTuple,
    Optional,
    TypedDict,
    TypeVar,
    Union,
    cast,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, create_model
from pydantic.fields import FieldInfo
from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, RelationshipProperty

from contact_store import settings

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from sqlalchemy import Column
    from sqlalchemy.orm import Mapper
    from sqlalchemy.sql.base import ReadOnlyColumnCollection
    from sqlalchemy.util import ReadOnlyProperties

__all__ = ["Attrib", "DTOInfo", "MapperBind", "Mark", "Purpose", "decorator", "factory", "mark"]

AnyDeclarative = TypeVar("AnyDeclarative", bound=DeclarativeBase)

_GENERATED_DTO_MODELS: dict[tuple[type[DeclarativeBase], Purpose], type[_MapperBind[Any]]] = {}
_NAMESPACE_MODULES: set[ModuleType] = set()


class Mark(str, Enum):
    """For marking column definitions on the domain models.

    Example:
    ```python
    class Model(Base):
        ...
        contact_id: Mapped[int] = mapped_column(info={"dto": Mark.READ_ONLY})
    ```
    """

    READ_ONLY = "read-only"
    SKIP = "skip"


class Purpose(Enum):
    """For identifying the purpose of a DTO to the factory.

    The factory will exclude fields marked as private or read-only on the domain model depending
    on the purpose of the DTO.

    Example:
    ```python
    ReadDTO = dto.factory("ContactRead", Contact, purpose=dto.Purpose.READ)
    ```
    """

    READ = auto()
    WRITE = auto()


class DTOInfo(TypedDict):
    """Represent dto infos suitable for info mapped_column infos param."""

    dto: Attrib


class Attrib(NamedTuple):
    """For configuring DTO behavior on SQLAlchemy model fields."""

    mark: Mark | None = None
    """Mark the field as read only, or skip."""
    pydantic_field: FieldInfo | None = None
    """If provided, used for the pydantic model for this attribute."""
    pydantic_type: Any | None = None
    """Override the field type on the pydantic model for this attribute."""
    validators: Iterable[Callable[[Any], Any]] | None = None
    """Single argument callables run by the DTO after validating the field."""


class _MapperBind(BaseModel, Generic[AnyDeclarative]):
    """Produce an SQLAlchemy instance with values from a pydantic model."""

    __sqla_model__: ClassVar[type[DeclarativeBase]]

    model_config = ConfigDict(from_attributes=True)

    def to_mapped(self) -> AnyDeclarative:
        """Create an instance of `self.__sqla_model__`

        Fill the bound SQLAlchemy model recursively with values from
        this model.
        """
        as_model = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, (list, tuple)):
                value = [el.to_mapped() if isinstance(el, _MapperBind) else el for el in value]
            if isinstance(value, _MapperBind):
                value = value.to_mapped()
            as_model[name] = value
        return cast("AnyDeclarative", self.__sqla_model__(**as_model))


class _FrozenMapperBind(_MapperBind[AnyDeclarative], Generic[AnyDeclarative]):
    """Immutable variant used for read DTOs."""

    model_config = ConfigDict(from_attributes=True, frozen=True)


class _StrictMapperBind(_MapperBind[AnyDeclarative], Generic[AnyDeclarative]):
    """Variant used for write DTOs, input is never coerced, e.g. `bytes` is not a `str`."""

    model_config = ConfigDict(from_attributes=True, strict=True)


MapperBind = _MapperBind
"""Base of every generated DTO, e.g. `MapperBind[Contact]` in annotations."""


def _construct_field_info(elem: Column | RelationshipProperty, purpose: Purpose) -> FieldInfo:
    default = getattr(elem, "default", None)
    nullable = getattr(elem, "nullable", False)
    if purpose is Purpose.READ:
        return cast("FieldInfo", Field())
    if default is None:
        if nullable:
            return cast("FieldInfo", Field(default=None))
        if isinstance(elem, RelationshipProperty):
            if elem.uselist:
                return cast("FieldInfo", Field(default_factory=list))
            return cast("FieldInfo", Field(default=None))
        return cast("FieldInfo", Field())
    if default.is_scalar:
        return cast("FieldInfo", Field(default=default.arg))
    if default.is_callable:
        return cast("FieldInfo", Field(default_factory=lambda: default.arg({})))
    raise ValueError("Unexpected default type")


def _get_dto_attrib(elem: Column | RelationshipProperty) -> Attrib:
    return elem.info.get(settings.app.DTO_INFO_KEY, Attrib())


def _should_exclude_field(
    purpose: Purpose, elem: Column | RelationshipProperty, exclude: set[str], dto_attrib: Attrib
) -> bool:
    if elem.key in exclude:
        return True
    if dto_attrib.mark is Mark.SKIP:
        return True
    if purpose is Purpose.WRITE and dto_attrib.mark is Mark.READ_ONLY:
        return True
    return False


def _inspect_model(
    model: type[DeclarativeBase],
) -> tuple[ReadOnlyColumnCollection[str, Column], ReadOnlyProperties[RelationshipProperty]]:
    mapper = cast("Mapper", inspect(model))
    columns = mapper.columns
    relationships = mapper.relationships
    return columns, relationships


def _is_model_ref(type_: Any) -> bool:
    return isclass(type_) and issubclass(type_, DeclarativeBase)


def _nested(
    name: str, model: type[DeclarativeBase], purpose: Purpose, parents: set[type[DeclarativeBase]]
) -> type[_MapperBind[Any]]:
    """DTO for a related model, reusing one already generated for it."""
    if (model, purpose) in _GENERATED_DTO_MODELS:
        return _GENERATED_DTO_MODELS[(model, purpose)]
    return factory(f"{name}_{model.__name__}", model, purpose, parents=parents)


def _resolve_type(
    name: str,
    type_: Any,
    parents: set[type[DeclarativeBase]],
    purpose: Purpose,
) -> Any | None:
    """Map a model annotation onto a DTO annotation.

    Returns `None` when the annotation refers back to a model in `parents`.
    """
    type_args = get_args(type_)
    type_origin = get_origin(type_)

    if _is_model_ref(type_):
        if type_ in parents:
            return None
        return _nested(name, type_, purpose, parents)
    # list[model], List[model] or Optional[model]
    if type_origin in (list, List, Optional) and type_args and _is_model_ref(type_args[0]):
        if type_args[0] in parents:
            return None
        inner = _nested(name, type_args[0], purpose, parents)
        if type_origin is Optional:
            return Optional[inner]
        return list[inner]  # type: ignore[valid-type]
    # model | None or Union[model, None]
    if type_origin in (Union, UnionType):
        resolved = []
        for arg in type_args:
            if not _is_model_ref(arg):
                resolved.append(arg)
                continue
            if arg in parents:
                return None
            resolved.append(_nested(name, arg, purpose, parents))
        return Union[tuple(resolved)]
    return type_


def _get_localns(model: type[DeclarativeBase]) -> dict[str, Any]:
    localns: dict[str, Any] = {}
    for mapper in model.registry.mappers:
        model_module = getmodule(mapper.class_)
        if model_module is not None:
            _NAMESPACE_MODULES.add(model_module)
    for module in _NAMESPACE_MODULES:
        localns.update(vars(module))
    return localns


def mark(mark_type: Mark) -> DTOInfo:
    """Shortcut for ```python.

    {"dto": Attrib(mark=mark_type)}
    ```

    Example:

    ```python
    class Address(Base):
        contact_id: Mapped[int] = mapped_column(
            ForeignKey("contact.id"), info=dto.mark(dto.Mark.READ_ONLY)
        )
    ```

    Args:
        mark_type: dto Mark

    Returns:
        A `DTOInfo` suitable to pass to `info` param of `mapped_column`
    """
    return {"dto": Attrib(mark=mark_type)}


def factory(
    name: str,
    model: type[AnyDeclarative],
    purpose: Purpose,
    *,
    exclude: set[str] | None = None,
    base: type[BaseModel] | None = None,
    parents: set[type[DeclarativeBase]] | None = None,
) -> type[_MapperBind[AnyDeclarative]]:
    """Infer a Pydantic model from a SQLAlchemy model.

    The fields that are included in the model can be controlled on the SQLAlchemy class
    definition by including a "dto" key in the `Column.info` mapping. For example:

    ```python
    class Address(Base):
        street: Mapped[str]
        contact_id: Mapped[int] = mapped_column(
            ForeignKey("contact.id"), info={"dto": Attrib(mark=dto.Mark.READ_ONLY)}
        )
        note: Mapped[str] = mapped_column(info={"dto": Attrib(mark=dto.Mark.SKIP)})
    ```

    In the above example, a DTO generated for `Purpose.READ` will include the `id`, `street`
    and `contact_id` fields, while a model generated for `Purpose.WRITE` will only include a
    field for `street`. Columns marked as `Mark.SKIP` will not have a field produced in any DTO
    object.

    DTOs generated without `exclude` or `base` are registered, and reused when another model
    refers to `model` through a relationship.

    Args:
        name: Name given to the DTO class.
        model: The SQLAlchemy model class.
        purpose: Is the DTO for write or read operations?
        exclude: Explicitly exclude attributes from the DTO.
        base: A subclass of `pydantic.BaseModel` to be used as the base class of the DTO.
        parents: Models already being built higher up a relationship chain.

    Returns:
        A Pydantic model that includes only fields that are appropriate to `purpose` and not in
        `exclude`.
    """
    parents = {*(parents or ()), model}
    exclude = set() if exclude is None else exclude

    columns, relationships = _inspect_model(model)
    fields: dict[str, tuple[Any, FieldInfo]] = {}
    for key, type_hint in get_type_hints(model, localns=_get_localns(model)).items():
        # don't override fields that already exist on `base`.
        if base is not None and key in base.model_fields:
            continue

        if get_origin(type_hint) is Mapped:
            (type_hint,) = get_args(type_hint)

        elem: Column | RelationshipProperty
        if key in columns:
            elem = columns[key]
        elif key in relationships:
            elem = relationships[key]
        else:
            # class var, anything else??
            continue

        attrib = _get_dto_attrib(elem)

        if _should_exclude_field(purpose, elem, exclude, attrib):
            continue

        if attrib.pydantic_type is not None:
            type_hint = attrib.pydantic_type

        type_hint = _resolve_type(name, type_hint, parents, purpose)
        if type_hint is None:
            continue

        for func in attrib.validators or []:
            type_hint = Annotated[type_hint, AfterValidator(func)]

        field_info = attrib.pydantic_field or _construct_field_info(elem, purpose)
        fields[key] = (type_hint, field_info)

    bind = _FrozenMapperBind if purpose is Purpose.READ else _StrictMapperBind
    dto = cast(
        "type[_MapperBind[AnyDeclarative]]",
        create_model(  # type:ignore[call-overload]
            name,
            __base__=tuple(filter(None, (base, bind))),
            __module__=getattr(model, "__module__", __name__),
            **fields,
        ),
    )
    dto.__sqla_model__ = model
    if base is None and not exclude:
        _GENERATED_DTO_MODELS.setdefault((model, purpose), dto)
    return dto


def decorator(
    model: type[AnyDeclarative], purpose: Purpose, *, exclude: set[str] | None = None
) -> Callable[[type[BaseModel]], type[_MapperBind[AnyDeclarative]]]:
    """Infer a Pydantic model from SQLAlchemy model."""

    def wrapper(cls: type[BaseModel]) -> type[_MapperBind[AnyDeclarative]]:
        def wrapped() -> type[_MapperBind[AnyDeclarative]]:
            return factory(cls.__name__, model, purpose, exclude=exclude, base=cls)

        return wrapped()

    return wrapper
