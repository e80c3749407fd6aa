from blogapp.domains.posts.models.post import Post

__all__ = ["Post"]
