from library_api.errors import Conflict, InvalidArgument, NotFound
from library_api.models.book import Book
from library_api.utils.ids import is_valid_id


class BookService:
    def __init__(self, store, books):
        self.store = store
        self.books = books

    def list_books(self):
        return self.books.list_all()

    def get_book(self, book_id: str):
        if not is_valid_id(book_id):
            raise InvalidArgument("Invalid Book ID")
        book = self.books.get(book_id)
        if not book:
            raise NotFound("Book not found")
        return book

    def create_book(self, data):
        book = Book(
            title=data.title.strip(),
            writer=data.writer,
            category=data.category,
            image=data.image,
            published=data.published,
            short_des=data.short_des,
            book_quantity=data.book_quantity,
        )
        return self.books.create(book)

    def update_book(self, book_id: str, data):
        book = self.get_book(book_id)
        for field in data.model_fields_set:
            value = getattr(data, field)
            if field == "title" and value is None:
                continue
            setattr(book, field, value)

        self.books.update()
        return book

    def adjust_stock(self, book_id: str, delta: int):
        if not is_valid_id(book_id):
            raise InvalidArgument("Invalid Book ID")

        def _adjust(unit):
            if not self.books.adjust_quantity(book_id, delta):
                if not self.books.exists(book_id):
                    raise NotFound("Book not found")
                raise Conflict("bookQuantity cannot go below zero")

        self.store.run_in_transaction(_adjust)
        return self.books.get(book_id)

    def delete_book(self, book_id: str):
        book = self.get_book(book_id)
        self.books.delete(book)
