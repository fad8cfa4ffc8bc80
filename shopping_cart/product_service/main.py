# shopping_cart/product_service/main.py
from fastapi import FastAPI, HTTPException, Query

app = FastAPI(title="Product Service (dev mock)")


PRODUCTS = {
    1: {"id": 1, "name": "Keyboard", "price": 199.99},
    2: {"id": 2, "name": "Mouse", "price": 49.50},
    3: {"id": 3, "name": "Monitor", "price": 899.00},
}


@app.get("/products")
def list_products(ids: str = Query("", description="Comma separated product ids")):
    # unknown ids are skipped, the cart treats them as unresolved
    wanted = [int(i) for i in ids.split(",") if i.strip()]
    return [PRODUCTS[i] for i in wanted if i in PRODUCTS]


@app.get("/products/{product_id}")
def get_product(product_id: int):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
