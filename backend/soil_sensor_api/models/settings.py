"""
Settings Model
==============
Typed view of config.yaml.

The YAML file uses flat lowercase keys (dbusername, dbport, espkey, ...).
Those are the field aliases here; code reads the snake_case attributes.

    dbusername: "123"
    dbpassword: "456"
    dbaddress: localhost
    dbport: 3306
    dbname: database1
    dbtable: table1
    httpport: 15000
    espkey: 0b8f2c1e-...
    legacystatuscodes: false

Settings are loaded once at startup and never change afterwards.

Author: Soil Sensor API Team
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from soil_sensor_api.utils.validation import (
    validate_table_name,
    validate_port,
    generate_device_key,
)


class Settings(BaseModel):
    """
    All tunable parameters of the service.

    Fields:
        db_username / db_password: MySQL credentials
        db_address / db_port: MySQL server location
        db_name: Database (schema) to connect to
        db_table: Table readings are appended to
        http_port: Port the HTTP API listens on
        esp_key: Shared secret devices must send as "key"
        legacy_status_codes: Answer every request with HTTP 200, like the
            first firmware-facing version of this API did
    """
    # Unquoted YAML numbers (dbpassword: 123456) are still strings to us
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )

    db_username: str = Field("123", alias="dbusername")
    db_password: str = Field("456", alias="dbpassword")
    db_address: str = Field("localhost", alias="dbaddress")
    db_port: int = Field(3306, alias="dbport")
    db_name: str = Field("database1", alias="dbname")
    db_table: str = Field("table1", alias="dbtable")
    http_port: int = Field(15000, alias="httpport")
    esp_key: str = Field(default_factory=generate_device_key, alias="espkey")
    legacy_status_codes: bool = Field(False, alias="legacystatuscodes")

    @field_validator("db_port", "http_port")
    @classmethod
    def _check_port(cls, value: int) -> int:
        if not validate_port(value):
            raise ValueError(f"port must be between 1 and 65535, got {value}")
        return value

    @field_validator("db_table")
    @classmethod
    def _check_table(cls, value: str) -> str:
        if not validate_table_name(value):
            raise ValueError(f"invalid table name: {value!r}")
        return value

    @field_validator("esp_key")
    @classmethod
    def _check_key(cls, value: str) -> str:
        if not value:
            raise ValueError("espkey must not be empty")
        return value

    def to_yaml_dict(self) -> dict:
        """Settings keyed the way they are written to config.yaml."""
        return self.model_dump(by_alias=True)
