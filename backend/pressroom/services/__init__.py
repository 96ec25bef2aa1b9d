# Services package init
"""
Pressroom Backend — Services Layer
====================================

Service Inventory:
    - ArticleService: article CRUD on the article database
    - AdminService: administrator registration on the admin database
    - ImageUploadAdapter: validates the `image` field and stores it
    - ImageStorage (abstract): ObjectImageStorage (S3-compatible, boto3)
      and LocalImageStorage (aiofiles)
    - security: bcrypt password hashing
"""
