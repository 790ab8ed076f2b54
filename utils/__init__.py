# Utils package for the catalog backend
