# Storefront / Admin GraphQL documents used by the catalog services

MONEY_FIELDS = """
  amount
  currencyCode
"""

IMAGE_FIELDS = """
  id
  url
  altText
  width
  height
"""

PRODUCT_FIELDS = f"""
  id
  title
  handle
  description
  descriptionHtml
  vendor
  productType
  tags
  totalInventory
  availableForSale
  createdAt
  updatedAt
  priceRange {{
    minVariantPrice {{ {MONEY_FIELDS} }}
    maxVariantPrice {{ {MONEY_FIELDS} }}
  }}
  compareAtPriceRange {{
    minVariantPrice {{ {MONEY_FIELDS} }}
    maxVariantPrice {{ {MONEY_FIELDS} }}
  }}
  images(first: 5) {{
    edges {{ node {{ {IMAGE_FIELDS} }} }}
  }}
  variants(first: 10) {{
    edges {{
      node {{
        id
        title
        sku
        availableForSale
        quantityAvailable
        price {{ {MONEY_FIELDS} }}
        compareAtPrice {{ {MONEY_FIELDS} }}
        selectedOptions {{
          name
          value
        }}
        image {{ {IMAGE_FIELDS} }}
      }}
    }}
  }}
  options {{
    id
    name
    values
  }}
"""

PAGE_INFO_FIELDS = """
  pageInfo {
    hasNextPage
    hasPreviousPage
    startCursor
    endCursor
  }
"""

PRODUCTS_QUERY = f"""
  query getProducts($first: Int!, $after: String) {{
    products(first: $first, after: $after) {{
      {PAGE_INFO_FIELDS}
      edges {{ node {{ {PRODUCT_FIELDS} }} }}
    }}
  }}
"""

PRODUCT_BY_HANDLE_QUERY = f"""
  query getProductByHandle($handle: String!) {{
    product(handle: $handle) {{
      {PRODUCT_FIELDS}
      collections(first: 10) {{
        edges {{
          node {{
            id
            handle
            title
          }}
        }}
      }}
    }}
  }}
"""

COLLECTIONS_QUERY = """
  query getCollections($first: Int!) {
    collections(first: $first) {
      edges {
        node {
          id
          title
          handle
          description
          image {
            url
          }
        }
      }
    }
  }
"""

COLLECTION_PRODUCTS_QUERY = f"""
  query getCollectionProducts($handle: String!, $first: Int!, $after: String) {{
    collection(handle: $handle) {{
      id
      title
      handle
      products(first: $first, after: $after) {{
        {PAGE_INFO_FIELDS}
        edges {{ node {{ {PRODUCT_FIELDS} }} }}
      }}
    }}
  }}
"""

# admin api
PRODUCT_METAFIELDS_QUERY = """
  query getProductMetafields($handle: String!) {
    productByHandle(handle: $handle) {
      metafields(first: 10) {
        edges {
          node {
            id
            namespace
            key
            value
            type
            description
          }
        }
      }
    }
  }
"""

METAOBJECT_QUERY = """
  query getMetaobject($id: ID!) {
    metaobject(id: $id) {
      id
      type
      fields {
        key
        value
        type
      }
    }
  }
"""
