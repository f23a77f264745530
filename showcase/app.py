# showcase/app.py

import os
import streamlit as st
import requests
from typing import List
from showcase.models import ProductView
from showcase.logger import configure_logging, get_logger

configure_logging()

log = get_logger(__name__)
log.info("Streamlit application is starting...")

API_URL = os.getenv("SHOWCASE_API_URL", "http://127.0.0.1:8080")
GRID_COLUMNS = 4


def main():
	st.set_page_config(
	page_title="Product Showcase",
	page_icon="🛍️",
	layout="wide"
	)

	st.title("Product Showcase")

	search = st.text_input("Search products", placeholder="Search products...", key="search")

	try:
		products = fetch_products(search)
		status = fetch_status()
	except requests.exceptions.RequestException as e:
		st.error("Unable to reach the showcase API. Please try again later.")
		log.exception(f"Streamlit could not reach API at {API_URL}: {e}")
		return

	if not status.get("seeded"):
		st.info("Loading products...")
	elif not products:
		st.info("No products match your search.")
	else:
		display_grid(products)

	if not status.get("settled"):
		st.caption("Product images are still loading.")
		st.button("Refresh", type="primary")


def fetch_products(search: str) -> List[ProductView]:
	log.debug(f"Requesting products from {API_URL}/products with search='{search}'")
	response = requests.get(f"{API_URL}/products", params={"search": search or None}, timeout=10)
	response.raise_for_status()
	return [ProductView(**item) for item in response.json()]


def fetch_status() -> dict:
	response = requests.get(f"{API_URL}/status", timeout=10)
	response.raise_for_status()
	return response.json()


def display_grid(products: List[ProductView]):
	"""Cards in rows of GRID_COLUMNS: square image, title, link out."""
	for start in range(0, len(products), GRID_COLUMNS):
		columns = st.columns(GRID_COLUMNS)
		for column, product in zip(columns, products[start:start + GRID_COLUMNS]):
			with column:
				with st.container(border=True):
					st.image(product.photo)
					st.subheader(product.title)
					if product.link:
						# Opens in a new tab
						st.link_button("Open", product.link)


if __name__ == "__main__":
	main()
