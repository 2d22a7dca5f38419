"""JSON schema for configuration structure validation."""

from __future__ import annotations

CONFIG_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "WSN Schedule Verification Config",
    "type": "object",
    "required": ["version", "nodes", "flows"],
    "properties": {
        "version": {"type": "string"},
        "nodes": {
            "type": "array",
            "minItems": 2,
            "items": {"type": "string", "minLength": 1},
        },
        "flows": {
            "type": "array",
            "minItems": 1,
            "items": {"$ref": "#/$defs/Flow"},
        },
        "schedule": {"$ref": "#/$defs/Schedule"},
        "analysis": {
            "type": "object",
            "properties": {
                "completion_policy": {"type": "string", "enum": ["final_link", "all_links"]},
                "separator": {"type": "string"},
            },
            "additionalProperties": False,
        },
    },
    "$defs": {
        "Flow": {
            "type": "object",
            "required": ["id", "path", "period", "deadline", "attempts"],
            "properties": {
                "id": {"type": "string", "minLength": 1},
                "path": {
                    "type": "array",
                    "minItems": 2,
                    "items": {"type": "string", "minLength": 1},
                },
                "period": {"type": "integer", "minimum": 1},
                "deadline": {"type": "integer", "minimum": 1},
                "phase": {"type": "integer", "minimum": 0, "default": 0},
                "priority": {"type": "integer", "default": 0},
                "attempts": {
                    "type": "array",
                    "minItems": 1,
                    "items": {"type": "integer", "minimum": 1},
                },
            },
            "additionalProperties": False,
        },
        "Schedule": {
            "type": "object",
            "properties": {
                "decoder": {"type": "string", "minLength": 1},
                "slots": {"type": "integer", "minimum": 1},
                "rows": {
                    "type": "array",
                    "items": {
                        "type": "array",
                        "items": {"type": ["string", "null"]},
                    },
                },
                "cells": {
                    "type": "array",
                    "items": {"$ref": "#/$defs/Cell"},
                },
            },
            "additionalProperties": False,
        },
        "Cell": {
            "type": "object",
            "required": ["time", "node", "content"],
            "properties": {
                "time": {"type": "integer", "minimum": 0},
                "node": {"type": "string", "minLength": 1},
                "content": {"type": "string"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}
