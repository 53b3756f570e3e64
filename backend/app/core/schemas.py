from pydantic import BaseModel, ConfigDict


def ToCamel(name: str) -> str:
    return name[:1].lower() + name[1:]


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=ToCamel, populate_by_name=True)
