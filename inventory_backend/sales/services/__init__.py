from .sale_service import add_sale_lines, allocate_line, create_sale, delete_sale

__all__ = ["create_sale", "add_sale_lines", "allocate_line", "delete_sale"]
