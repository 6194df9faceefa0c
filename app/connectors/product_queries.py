"""
app/connectors/product_queries.py

GraphQL documents for product review metafields.
"""

from __future__ import annotations

REVIEWS_METAFIELD_NAMESPACE = "hydrogen_reviews"
REVIEWS_METAFIELD_KEY = "product_reviews"
REVIEWS_METAFIELD_TYPE = "json"

_PRODUCT_FIELDS = f"""
    id
    title
    handle
    metafield(namespace: "{REVIEWS_METAFIELD_NAMESPACE}", key: "{REVIEWS_METAFIELD_KEY}") {{
      id
      key
      namespace
      value
    }}
"""

GET_PRODUCT_BY_HANDLE_QUERY = f"""
query getProductByHandle($handle: String!) {{
  productByHandle(handle: $handle) {{{_PRODUCT_FIELDS}  }}
}}
"""

GET_PRODUCT_BY_ID_QUERY = f"""
query getProductById($id: ID!) {{
  product(id: $id) {{{_PRODUCT_FIELDS}  }}
}}
"""

PRODUCT_METAFIELD_MUTATION = f"""
mutation updateProduct($input: ProductInput!) {{
  productUpdate(input: $input) {{
    product {{
      id
      metafield(namespace: "{REVIEWS_METAFIELD_NAMESPACE}", key: "{REVIEWS_METAFIELD_KEY}") {{
        id
        key
        namespace
        value
      }}
    }}
    userErrors {{
      field
      message
    }}
  }}
}}
"""

LIST_PRODUCTS_QUERY = f"""
query getProducts($first: Int!, $after: String) {{
  products(first: $first, after: $after) {{
    edges {{
      node {{{_PRODUCT_FIELDS}      }}
    }}
    pageInfo {{
      endCursor
      hasNextPage
    }}
  }}
}}
"""

METAFIELD_DEFINITION_QUERY = f"""
query getMetafieldDefinition {{
  metafieldDefinitions(namespace: "{REVIEWS_METAFIELD_NAMESPACE}", ownerType: PRODUCT, first: 1) {{
    edges {{
      node {{
        name
        type {{
          name
        }}
      }}
    }}
  }}
}}
"""

METAFIELD_DEFINITION_MUTATION = f"""
mutation createMetafieldDefinition {{
  metafieldDefinitionCreate(
    definition: {{
      name: "Product Reviews"
      namespace: "{REVIEWS_METAFIELD_NAMESPACE}"
      key: "{REVIEWS_METAFIELD_KEY}"
      type: "{REVIEWS_METAFIELD_TYPE}"
      ownerType: PRODUCT
    }}
  ) {{
    createdDefinition {{
      name
      type {{
        name
      }}
    }}
    userErrors {{
      field
      message
    }}
  }}
}}
"""
