"""Core refresh components: resolvers, downloader, tools and the pipeline."""
