from cookbook.app.app import db


class Recipe(db.Model):
    __tablename__ = "recipes"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False, default="")
    instructions = db.Column(db.Text, nullable=False, default="")
    likes = db.Column(db.Integer, nullable=False, default=0)
    creator_name = db.Column("creatorName", db.String(255), nullable=False, default="")

    def __repr__(self):
        return f"RECIPE: {self.title} (id: {self.id})"


class Ingredient(db.Model):
    __tablename__ = "ingredients"

    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey("recipes.id"), nullable=False, index=True)
    ingredient = db.Column(db.String(255), nullable=False)
    amount = db.Column(db.String(255), nullable=False)


class Tag(db.Model):
    __tablename__ = "tags"

    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey("recipes.id"), nullable=False, index=True)
    tag = db.Column(db.String(100), nullable=False, index=True)
