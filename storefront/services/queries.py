# Storefront API GraphQL documents

PRODUCT_CARD_FRAGMENT = """
fragment ProductCard on Product {
  id
  title
  publishedAt
  handle
  variants(first: 1) {
    nodes {
      id
      image {
        url
        altText
        width
        height
      }
      price {
        amount
        currencyCode
      }
      compareAtPrice {
        amount
        currencyCode
      }
      selectedOptions {
        name
        value
      }
    }
  }
}
"""

COLLECTION_QUERY = """
query CollectionDetails(
  $handle: String!
  $cursor: String
  $filters: [ProductFilter!]
  $sortKey: ProductCollectionSortKeys!
  $reverse: Boolean
  $pageBy: Int!
  $collectionsLimit: Int!
) {
  collection(handle: $handle) {
    id
    title
    description
    handle
    products(
      first: $pageBy
      after: $cursor
      filters: $filters
      sortKey: $sortKey
      reverse: $reverse
    ) {
      filters {
        id
        label
        type
        values {
          id
          label
          count
          input
        }
      }
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        ...ProductCard
      }
    }
  }
  collections(first: $collectionsLimit) {
    edges {
      node {
        title
        handle
      }
    }
  }
}
""" + PRODUCT_CARD_FRAGMENT

FEATURED_COLLECTIONS_QUERY = """
query FeaturedCollections($first: Int!) {
  collections(first: $first, query: "collection_type:smart") {
    nodes {
      id
      title
      handle
      image {
        altText
        width
        height
        url
      }
    }
  }
}
"""

LAYOUT_QUERY = """
query layout {
  shop {
    name
    description
  }
}
"""
