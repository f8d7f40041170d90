"""
models.py - Record types shared by the sql_wrapper tests.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sql_wrapper import column, transient


class Season(str, Enum):
    SUMMER = "Summer"
    AUTUMN = "Autumn"
    WINTER = "Winter"
    SPRING = "Spring"


@dataclass
class Record:
    Name: str = column("VARCHAR(128)")
    Likes: int = column("INT")
    Type: str = column("TEXT")


@dataclass
class Person:
    Name: str = column("VARCHAR(128)", "Name")
    Age: int = column("INT(255)", "Age")
    Weather: Season = column(
        "TEXT CHECK(Weather IN ('Summer', 'Autumn', 'Winter', 'Spring')) NOT NULL"
    )
    Hidden: str = transient(default="", compare=False)


@dataclass
class Reference:
    OneToOne: Optional[Person] = column(name="OneToOneID", relation="one-to-one")
    ManyToOne: Optional[Person] = column(name="ManyToOneID", relation="many-to-one")
    OneToMany: list[Person] = column(name="OneToManyID", relation="one-to-many")


@dataclass
class Tag:
    Label: str = column("TEXT NOT NULL")


@dataclass
class Article:
    Title: str = column("TEXT")
    Tags: list[Tag] = column(name="TagID", relation="many-to-many")


@dataclass
class Node:
    Label: str = column("TEXT")
    Parent: Optional["Node"] = column(name="ParentID", relation="many-to-one")


@dataclass
class Owner:
    Name: str = column("TEXT")
    Pet: Optional[Person] = column(name="PetID", relation="one-to-one", on_delete="CASCADE")
