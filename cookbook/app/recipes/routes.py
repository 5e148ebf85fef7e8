import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import Schema, fields, ValidationError, EXCLUDE, pre_load, validates_schema
from cookbook.app.app import error_response
from cookbook.app.recipes.store import StoreError


# -------- Marshmallow Schemas for Validation --------

class RecipeSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Int(strict=True, load_default=0)
    title = fields.Str(load_default="")
    tags = fields.List(fields.Str(), allow_none=True, load_default=None)
    ingredients = fields.List(fields.Str(), allow_none=True, load_default=None)
    amount = fields.List(fields.Str(), allow_none=True, load_default=None)
    instructions = fields.Str(load_default="")
    likes = fields.Int(strict=True, load_default=0)
    creator_name = fields.Str(data_key="creatorName", load_default="")

    @pre_load
    def nulls_to_defaults(self, data, **kwargs):
        # A JSON null leaves the field at its default.
        return {key: value for key, value in data.items() if value is not None}

    @validates_schema
    def amounts_match_ingredients(self, data, **kwargs):
        ingredients = data.get("ingredients") or []
        amount = data.get("amount") or []
        if len(ingredients) != len(amount):
            raise ValidationError(
                f"Got {len(ingredients)} ingredients but {len(amount)} amounts",
                field_name="amount",
            )


recipe_schema = RecipeSchema()


#-------- Utility functions --------

def get_store():
    return current_app.extensions["recipe_store"]

def load_recipe():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return recipe_schema.load(data)

def recipes_response(recipes):
    return jsonify(recipe_schema.dump(recipes, many=True)), 200


recipes = Blueprint("recipes", __name__)


#-------- Handlers --------

@recipes.errorhandler(ValidationError)
def validation_error_handler(e):
    logging.warning(f"Rejected recipe body on {request.path}: {e.messages}")
    return error_response(e.messages, 400)

@recipes.errorhandler(StoreError)
def store_error_handler(e):
    return error_response(str(e), 500)


# -------- Ping --------

PING_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "TRACE", "CONNECT"]

@recipes.route("/ping", methods=PING_METHODS)
def ping():
    logging.info("pong")
    return "pong", 200, {"Content-Type": "text/plain; charset=utf-8"}


# -------- Writing recipe --------

@recipes.route("/writeRecipe", methods=["POST"])
def write_recipe():
    data = load_recipe()
    recipe_id = get_store().write_recipe(data)
    return jsonify({"id": recipe_id}), 201


# -------- Query by example --------

@recipes.route("/getRecipe", methods=["GET"])
def get_recipe():
    """Search by id, else by title substring, else by tags; first non-empty criterion wins."""
    data = load_recipe()
    store = get_store()

    if data["id"] != 0:
        found = store.recipes_by_id(data["id"])
    elif data["title"] != "":
        found = store.recipes_by_title(data["title"])
    elif data["tags"]:
        found = store.recipes_by_tags(data["tags"])
    else:
        found = []

    return recipes_response(found)


# -------- Likes --------

@recipes.route("/addLike", methods=["POST"])
def add_like():
    data = load_recipe()
    get_store().add_like(data["id"])
    return "", 200

@recipes.route("/removeLike", methods=["POST"])
def remove_like():
    data = load_recipe()
    get_store().remove_like(data["id"])
    return "", 200


# -------- All recipes --------

@recipes.route("/getAllRecipes", methods=["GET"])
def get_all_recipes():
    return recipes_response(get_store().all_recipes())


# -------- Deleting recipe --------

@recipes.route("/deleteRecipeById", methods=["POST"])
def delete_recipe_by_id():
    data = load_recipe()
    get_store().delete_recipe(data["id"])
    return "", 200
