import logging
from contextlib import contextmanager
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from cookbook.app.recipes.model import Recipe, Ingredient, Tag


class StoreError(Exception):
    """A database operation failed; the session has been rolled back."""


class RecipeStore:
    """Every query the service runs against the recipes, ingredients and tags tables.

    Reads return plain dicts in the wire shape, already enriched with tags and
    ingredients. Multi-statement writes run in a single transaction.
    """

    def __init__(self, session):
        self.session = session

    @contextmanager
    def _guard(self, action, commit=False):
        try:
            yield self.session
            if commit:
                self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logging.error(f"Failed to {action}: {e}")
            raise StoreError(str(e)) from e

    # -------- Reads --------

    def all_recipes(self):
        with self._guard("fetch all recipes") as session:
            rows = session.execute(select(Recipe).order_by(Recipe.id)).scalars().all()
            return self.collect_tags_and_ingredients(rows)

    def recipes_by_id(self, recipe_id):
        with self._guard(f"fetch recipe {recipe_id}") as session:
            rows = session.execute(select(Recipe).where(Recipe.id == recipe_id)).scalars().all()
            return self.collect_tags_and_ingredients(rows)

    def recipes_by_title(self, title):
        with self._guard(f"fetch recipes titled like {title!r}") as session:
            rows = session.execute(
                select(Recipe).where(Recipe.title.contains(title, autoescape=True)).order_by(Recipe.id)
            ).scalars().all()
            # LIKE folds case on most collations; the match itself must not.
            rows = [r for r in rows if title in r.title]
            return self.collect_tags_and_ingredients(rows)

    def recipes_by_tags(self, tags):
        if not tags:
            return []

        with self._guard(f"fetch recipes tagged {tags}") as session:
            found = session.execute(
                select(Tag).where(Tag.tag.in_(tags)).order_by(Tag.id)
            ).scalars().all()

            recipe_ids = []
            for name in tags:
                for tag in found:
                    if tag.tag == name and tag.recipe_id not in recipe_ids:
                        recipe_ids.append(tag.recipe_id)

            if not recipe_ids:
                return []

            by_id = {
                r.id: r for r in session.execute(
                    select(Recipe).where(Recipe.id.in_(recipe_ids))
                ).scalars()
            }
            rows = [by_id[rid] for rid in recipe_ids if rid in by_id]
            return self.collect_tags_and_ingredients(rows)

    def collect_tags_and_ingredients(self, recipes):
        """Attach tag texts and ingredient/amount pairs to each recipe, in row order."""
        out = []
        for r in recipes:
            out.append({
                "id": r.id,
                "title": r.title,
                "instructions": r.instructions,
                "likes": r.likes,
                "creator_name": r.creator_name,
                "tags": [],
                "ingredients": [],
                "amount": [],
            })
        if not out:
            return out

        index = {recipe["id"]: recipe for recipe in out}
        ids = list(index)

        tag_rows = self.session.execute(
            select(Tag).where(Tag.recipe_id.in_(ids)).order_by(Tag.id)
        ).scalars()
        for tag in tag_rows:
            index[tag.recipe_id]["tags"].append(tag.tag)

        ingredient_rows = self.session.execute(
            select(Ingredient).where(Ingredient.recipe_id.in_(ids)).order_by(Ingredient.id)
        ).scalars()
        for ing in ingredient_rows:
            index[ing.recipe_id]["ingredients"].append(ing.ingredient)
            index[ing.recipe_id]["amount"].append(ing.amount)

        return out

    # -------- Writes --------

    def write_recipe(self, data):
        with self._guard("write recipe", commit=True) as session:
            recipe = Recipe(
                title=data["title"],
                instructions=data["instructions"],
                likes=data["likes"],
                creator_name=data["creator_name"],
            )
            session.add(recipe)
            session.flush()
            recipe_id = recipe.id
            title = recipe.title

            for ingredient, amount in zip(data["ingredients"] or [], data["amount"] or []):
                session.add(Ingredient(recipe_id=recipe_id, ingredient=ingredient, amount=amount))
            for tag in data["tags"] or []:
                session.add(Tag(recipe_id=recipe_id, tag=tag))

        logging.info(f"Recipe written: {title} (id: {recipe_id})")
        return recipe_id

    def add_like(self, recipe_id):
        return self._change_likes(recipe_id, 1)

    def remove_like(self, recipe_id):
        return self._change_likes(recipe_id, -1)

    def _change_likes(self, recipe_id, delta):
        with self._guard(f"change likes of recipe {recipe_id}", commit=True) as session:
            result = session.execute(
                update(Recipe).where(Recipe.id == recipe_id).values(likes=Recipe.likes + delta)
            )
        if result.rowcount == 0:
            logging.warning(f"Like change for unknown recipe id {recipe_id}")
        return result.rowcount

    def delete_recipe(self, recipe_id):
        with self._guard(f"delete recipe {recipe_id}", commit=True) as session:
            session.execute(delete(Tag).where(Tag.recipe_id == recipe_id))
            session.execute(delete(Ingredient).where(Ingredient.recipe_id == recipe_id))
            result = session.execute(delete(Recipe).where(Recipe.id == recipe_id))
        logging.info(f"Recipe deleted: id {recipe_id}")
        return result.rowcount
