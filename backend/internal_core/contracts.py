from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PromptKind = Literal["writing", "task", "structure"]


class Category(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    color: str
    icon: str
    userId: int


class CategoryCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=128)
    color: str = Field(min_length=1, max_length=64)
    icon: str = Field(min_length=1, max_length=64)


class CategoryUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    color: Optional[str] = Field(default=None, min_length=1, max_length=64)
    icon: Optional[str] = Field(default=None, min_length=1, max_length=64)


class Note(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    title: str
    content: str
    isFavorite: bool = False
    isArchived: bool = False
    createdAt: datetime
    updatedAt: datetime
    userId: int
    categoryId: Optional[int] = None


class NoteCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(max_length=512)
    content: str = ""
    isFavorite: bool = False
    isArchived: bool = False
    categoryId: Optional[int] = None


class NoteUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, max_length=512)
    content: Optional[str] = None
    isFavorite: Optional[bool] = None
    isArchived: Optional[bool] = None
    categoryId: Optional[int] = None


class Task(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    description: str
    completed: bool = False
    dueDate: Optional[datetime] = None
    noteId: int


class TaskCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str = Field(min_length=1)
    completed: bool = False
    dueDate: Optional[datetime] = None


class TaskUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = Field(default=None, min_length=1)
    completed: Optional[bool] = None
    dueDate: Optional[datetime] = None
