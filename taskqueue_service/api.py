"""HTTP API for creating and reading tasks, with the Swagger description."""

from __future__ import annotations

import copy
import json
import sqlite3
from contextlib import suppress

import redis
from flask import Flask, jsonify, request

from .storage import TaskNotFoundError
from .worker import QUEUE_KEY

_REQUIRED_TITLE = "Key: 'Title' Error:Field validation for 'Title' failed on the 'required' tag"

_TASK_REF = {"$ref": "#/definitions/models.Task"}
_ERROR_SCHEMA = {"type": "object", "additionalProperties": True}

_SPEC = {
    "schemes": [],
    "swagger": "2.0",
    "info": {
        "description": "API для управления задачами",
        "title": "Task Service API",
        "contact": {},
        "version": "1.0",
    },
    "host": "localhost:8080",
    "basePath": "/",
    "paths": {
        "/task": {
            "post": {
                "description": "Создает новую задачу и помещает в очередь Redis",
                "consumes": ["application/json"],
                "produces": ["application/json"],
                "tags": ["tasks"],
                "summary": "Создать новую задачу",
                "parameters": [
                    {
                        "description": "Данные задачи",
                        "name": "task",
                        "in": "body",
                        "required": True,
                        "schema": _TASK_REF,
                    }
                ],
                "responses": {
                    "201": {"description": "Created", "schema": _TASK_REF},
                    "400": {"description": "Bad Request", "schema": _ERROR_SCHEMA},
                },
            }
        },
        "/task/{id}": {
            "get": {
                "description": "Возвращает задачу из базы данных по её ID",
                "produces": ["application/json"],
                "tags": ["tasks"],
                "summary": "Получить задачу по ID",
                "parameters": [
                    {
                        "type": "integer",
                        "description": "ID задачи",
                        "name": "id",
                        "in": "path",
                        "required": True,
                    }
                ],
                "responses": {
                    "200": {"description": "OK", "schema": _TASK_REF},
                    "404": {"description": "Not Found", "schema": _ERROR_SCHEMA},
                },
            }
        },
    },
    "definitions": {
        "models.Task": {
            "type": "object",
            "properties": {
                "attempts": {"type": "integer"},
                "created_at": {"type": "string"},
                "description": {"type": "string"},
                "id": {"type": "integer"},
                "status": {"type": "string"},
                "title": {"type": "string"},
            },
        }
    },
}


def swagger_spec() -> dict:
    """Return a fresh copy of the Swagger 2.0 description of the API."""
    return copy.deepcopy(_SPEC)


def _parse_task_input(payload):
    if not isinstance(payload, dict):
        raise ValueError("invalid request body")
    title = payload.get("title")
    description = payload.get("description")
    if title is not None and not isinstance(title, str):
        raise ValueError("title must be a string")
    if description is not None and not isinstance(description, str):
        raise ValueError("description must be a string")
    if not title:
        raise ValueError(_REQUIRED_TITLE)
    return title, description or ""


def create_app(store, redis_client) -> Flask:
    """Build the Flask application serving the task endpoints."""
    app = Flask(__name__)

    @app.post("/task")
    def create_task():
        payload = request.get_json(force=True, silent=True)
        try:
            title, description = _parse_task_input(payload)
        except ValueError as exc:
            return jsonify(error=str(exc)), 400
        try:
            task = store.create(title, description)
        except sqlite3.Error:
            return jsonify(error="cannot create task"), 500
        with suppress(redis.RedisError):
            redis_client.rpush(QUEUE_KEY, json.dumps(task.id))
        return jsonify(task.to_dict()), 200

    @app.get("/task/<task_id>")
    def get_task(task_id):
        if not (task_id.isascii() and task_id.isdigit()):
            return jsonify(error="task not found"), 404
        try:
            task = store.get(int(task_id))
        except TaskNotFoundError:
            return jsonify(error="task not found"), 404
        return jsonify(task.to_dict()), 200

    @app.get("/swagger/doc.json")
    def swagger_doc():
        return jsonify(swagger_spec())

    return app