from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from crypto_utils import AESCipher

db = SQLAlchemy()
bcrypt = Bcrypt()
aes = AESCipher()
