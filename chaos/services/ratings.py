from chaos.extensions import db
from chaos.models import Rating
from chaos.models.rating import MAX_RATING, MIN_RATING


def parse_rating(data):
    """Return ``(rating, comment)`` from a request body, or raise ``ValueError``."""
    if not isinstance(data, dict):
        raise ValueError("Bad request")

    rating = data.get("rating")
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValueError("Rating must be an integer")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

    comment = data.get("comment")
    if comment is not None and not isinstance(comment, str):
        raise ValueError("Comment must be a string")
    if comment is not None and not comment.strip():
        comment = None
    return rating, comment


def create_rating(application, rater, rating, comment=None):
    row = Rating(
        application_id=application.id,
        rater_id=rater.id,
        rating=rating,
        comment=comment,
    )
    db.session.add(row)
    db.session.commit()
    return row


def update_rating(row, rating, comment=None):
    row.rating = rating
    row.comment = comment
    db.session.commit()
    return row


def delete_rating(row):
    db.session.delete(row)
    db.session.commit()


def application_ratings(application):
    return Rating.query.filter_by(application_id=application.id).order_by(Rating.id).all()
